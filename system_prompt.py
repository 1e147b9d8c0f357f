RESULT_JSON_SHAPE = """\
Return as JSON:
{{
  "enhancedPrompt": "{placeholder}",
  "negativePrompt": "negative prompt here",
  "suggestions": ["suggestion 1", "suggestion 2", ...]
}}"""

QUESTIONS_PROMPT = """\
Based on this basic image prompt idea: "{basic_prompt}"

Generate exactly {count} questions in Polish to help enhance this prompt. The first question should always be about artistic style. Each question should have {options} relevant options.

Return a JSON array with this exact structure:
[
  {{
    "id": "q1",
    "questionText": "Jaki styl artystyczny preferujesz?",
    "options": ["Fotorealistyczny", "Malarstwo olejne", "Akwarela", "Cyfrowy", "Szkic ołówkiem", "Pop art", "Surrealizm", "Impresjonizm", "Minimalistyczny", "Abstrakcyjny"]
  }}
]

Make sure all questions and options are in Polish. Focus on aspects like style, mood, lighting, composition, colors, details, etc."""

ENHANCE_PROMPT = """\
Create a high-quality English image generation prompt based on:

Basic idea: {basic_prompt}

User preferences:
{answers}

Generate:
1. Enhanced main prompt (detailed, professional, in English)
2. Negative prompt (what to avoid, in English)
3. 3-5 suggestions for further improvements (in English)

"""

DESCRIPTION_PROMPT = """\
Analyze this image and create a detailed English description that could be used as a base for an image generation prompt. Focus on:
- Main subject/objects
- Style and artistic elements
- Colors and lighting
- Composition and mood
- Important details

Provide a concise but descriptive prompt in English."""

MAGIC_PROMPT = """\
Create a magical, highly detailed English image generation prompt based on: "{basic_prompt}"

{dimensions}

Transform this basic idea into a stunning, professional-quality prompt with:
- Rich artistic details
- Professional photography/art terminology
- Specific lighting and mood descriptions
- High-quality rendering specifications

Also provide:
- Negative prompt (what to avoid)
- 3-5 creative suggestions for variations

"""

COPY_IMAGE_PROMPT = """\
Analyze this image in extreme detail and create a comprehensive English prompt that would recreate this image as closely as possible. Include:

- Exact description of all subjects/objects
- Precise artistic style and technique
- Detailed lighting setup and shadows
- Color palette and saturation
- Composition and framing
- Texture and material details
- Background elements
- Camera settings if photographic

Also provide:
- Negative prompt to avoid unwanted elements
- 3-5 suggestions for fine-tuning

"""

STYLE_INFLUENCE_PROMPT = """\
Create an English image generation prompt that combines:

Subject/Theme: {basic_prompt}
{dimensions}

Analyze the style reference image and apply its artistic characteristics to the subject. Focus on:
- Artistic technique and medium
- Color palette and mood
- Lighting style
- Brushwork or rendering technique
- Overall aesthetic approach

Create a detailed prompt that merges the subject with the reference style.

Also provide:
- Negative prompt
- 3-5 creative variations

"""

REFINE_PROMPT = """\
Refine and improve this edited prompt while maintaining the user's intent:

Edited Prompt: {edited_prompt}

Original Context:
- Basic idea: {basic_prompt}
- User preferences: {answers}

Improve the edited prompt by:
- Fixing any grammar or clarity issues
- Enhancing technical terminology
- Maintaining the user's creative vision
- Adding professional quality specifications

Provide:
- Refined enhanced prompt
- Updated negative prompt
- 3-5 suggestions for further refinement

"""
