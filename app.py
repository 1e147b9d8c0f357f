import logging

from flask import Flask, request, jsonify
from google import genai
from google.genai import types

import config
from errors import ConfigurationError, InvalidTransition, PromptEnhancerError, ValidationError
from generation import PromptGenerator
from models import ASPECT_RATIOS, NUMBER_OF_QUESTIONS
from session import PromptSession
from uploads import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE_MB

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
# Room for a 5 MB image plus multipart overhead; the size check itself is in uploads.
app.config["MAX_CONTENT_LENGTH"] = 8 * 1024 * 1024


def build_session():
    """Create the process-wide session; a bad credential leaves it in ERROR."""
    try:
        api_key = config.validate_api_key(config.API_KEY)
        model = config.validate_model(config.MODEL)
    except ConfigurationError as e:
        logger.error("Configuration problem: %s", e.message)
        return PromptSession(generator=None, config_error=e)

    client = genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=config.TIMEOUT_MS),
    )
    logger.info("Gemini client ready, model %s", model)
    return PromptSession(PromptGenerator(client, model))


session = build_session()


def _form():
    return request.get_json(silent=True) or {}


def _apply_form(data):
    """Push idea and output settings sent along with an action from the first step."""
    if "basicPrompt" in data:
        session.set_idea(data["basicPrompt"])
    keys = ("aspectRatio", "customWidth", "customHeight")
    if any(k in data for k in keys):
        session.set_output_settings(
            data.get("aspectRatio"), data.get("customWidth"), data.get("customHeight")
        )


@app.errorhandler(ValidationError)
def handle_validation(e):
    return jsonify({"error": e.message, "state": session.view()}), 400


@app.errorhandler(InvalidTransition)
def handle_invalid_transition(e):
    return jsonify({"error": e.message, "state": session.view()}), 409


@app.errorhandler(PromptEnhancerError)
def handle_other(e):
    logger.error("Unhandled %s: %s", type(e).__name__, e.message)
    return jsonify({"error": e.message, "state": session.view()}), 500


@app.route("/")
def index():
    return (
        HTML_PAGE
        .replace("__NUMBER_OF_QUESTIONS__", str(NUMBER_OF_QUESTIONS))
        .replace("__MAX_IMAGE_SIZE_MB__", str(MAX_IMAGE_SIZE_MB))
        .replace("__ALLOWED_IMAGE_TYPES__", ",".join(ALLOWED_IMAGE_TYPES))
        .replace("/*__ASPECT_RATIOS__*/", _aspect_ratio_options())
    )


def _aspect_ratio_options():
    return "".join(
        f'<option value="{value}">{label}</option>' for value, label in ASPECT_RATIOS.items()
    )


@app.route("/api/state")
def get_state():
    return jsonify(session.view())


@app.route("/api/idea", methods=["POST"])
def set_idea():
    return jsonify(session.set_idea(_form().get("basicPrompt", "")))


@app.route("/api/output-settings", methods=["POST"])
def set_output_settings():
    data = _form()
    return jsonify(session.set_output_settings(
        data.get("aspectRatio"), data.get("customWidth"), data.get("customHeight")
    ))


@app.route("/api/answers", methods=["POST"])
def update_answer():
    data = _form()
    question_id = data.get("id")
    if not question_id:
        raise ValidationError("Brak identyfikatora pytania.")
    checked = data.get("checked")
    return jsonify(session.update_answer(
        question_id,
        answer=data.get("answer"),
        option=data.get("option"),
        checked=None if checked is None else bool(checked),
    ))


@app.route("/api/images/<slot>", methods=["POST"])
def upload_image(slot):
    file = request.files.get("file")
    if file is None or not file.filename:
        raise ValidationError("Nie wybrano pliku.")
    data = file.read()
    return jsonify(session.upload_image(slot, file.filename, file.mimetype, data))


@app.route("/api/images/<slot>", methods=["DELETE"])
def clear_image(slot):
    return jsonify(session.clear_image(slot))


@app.route("/api/describe", methods=["POST"])
def describe_image():
    return jsonify(session.describe_image())


@app.route("/api/questions", methods=["POST"])
def generate_questions():
    _apply_form(_form())
    return jsonify(session.submit_idea())


@app.route("/api/enhance", methods=["POST"])
def generate_enhanced_prompt():
    return jsonify(session.submit_answers())


@app.route("/api/magic", methods=["POST"])
def generate_magic_prompt():
    _apply_form(_form())
    return jsonify(session.magic_prompt())


@app.route("/api/copy-image", methods=["POST"])
def generate_copy_image_prompt():
    return jsonify(session.copy_image())


@app.route("/api/style-influence", methods=["POST"])
def generate_style_influence_prompt():
    _apply_form(_form())
    return jsonify(session.style_influence())


@app.route("/api/edit", methods=["POST"])
def start_editing():
    return jsonify(session.start_editing())


@app.route("/api/edit/cancel", methods=["POST"])
def cancel_editing():
    return jsonify(session.cancel_editing())


@app.route("/api/refine", methods=["POST"])
def refine_edited_prompt():
    data = _form()
    if "draft" in data:
        session.set_draft(data["draft"])
    return jsonify(session.submit_refinement())


@app.route("/api/start-over", methods=["POST"])
def start_over():
    return jsonify(session.start_over())


HTML_PAGE = r"""<!DOCTYPE html>
<html lang="pl">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>AI Prompt Enhancer Pro</title>
<style>
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: #0f0f0f;
    color: #e0e0e0;
    min-height: 100vh;
  }

  main {
    max-width: 760px;
    margin: 0 auto;
    padding: 32px 24px 80px;
    display: flex;
    flex-direction: column;
    gap: 20px;
  }

  header h1 { font-size: 1.8rem; font-weight: 700; color: #fff; text-align: center; }
  header p { margin-top: 8px; font-size: 0.85rem; color: #888; text-align: center; line-height: 1.5; }

  h2 { font-size: 1.2rem; font-weight: 600; color: #a78bfa; }
  h3 { font-size: 0.95rem; font-weight: 600; color: #fff; }

  .card {
    background: #1a1a1a;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    padding: 16px;
    display: flex;
    flex-direction: column;
    gap: 12px;
  }

  label.field { font-size: 0.8rem; color: #aaa; }

  textarea, input[type=number], select {
    width: 100%;
    background: #141414;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 8px;
    padding: 10px 12px;
    font-size: 0.9rem;
    font-family: inherit;
    outline: none;
    transition: border-color 0.2s;
  }
  textarea { min-height: 90px; resize: vertical; line-height: 1.5; }
  textarea:focus, input:focus, select:focus { border-color: #8b5cf6; }

  button {
    background: #8b5cf6;
    color: #fff;
    border: none;
    border-radius: 8px;
    padding: 9px 18px;
    font-size: 0.85rem;
    font-weight: 500;
    cursor: pointer;
    transition: background 0.2s, opacity 0.2s;
  }
  button:hover { background: #7c3aed; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }
  button.secondary { background: #232323; color: #ccc; border: 1px solid #333; }
  button.secondary:hover { background: #2e2e2e; color: #fff; }
  button.magic { background: #9333ea; }
  button.style { background: #16a34a; }
  button.wide { width: 100%; }

  .row { display: flex; gap: 10px; flex-wrap: wrap; }
  .row > * { flex: 1; }

  .preview { display: flex; gap: 12px; align-items: flex-start; }
  .preview img { max-width: 220px; max-height: 160px; border-radius: 8px; border: 1px solid #333; }

  .message {
    border: 1px solid #ef4444;
    color: #fca5a5;
    background: #1a1111;
    border-radius: 8px;
    padding: 10px 14px;
    font-size: 0.85rem;
  }
  .hint { font-size: 0.75rem; color: #f87171; }

  .options {
    display: grid;
    grid-template-columns: 1fr 1fr;
    gap: 6px 16px;
    max-height: 240px;
    overflow-y: auto;
  }
  .options label { display: flex; gap: 8px; align-items: flex-start; font-size: 0.85rem; color: #ccc; cursor: pointer; }

  pre.output {
    background: #141414;
    border-radius: 8px;
    padding: 12px;
    white-space: pre-wrap;
    word-break: break-word;
    font-family: inherit;
    font-size: 0.88rem;
    line-height: 1.6;
  }

  .loading {
    display: flex;
    flex-direction: column;
    align-items: center;
    gap: 14px;
    padding: 60px 0;
    text-align: center;
    color: #888;
  }
  .loading .title { font-size: 1.1rem; color: #a78bfa; }
  .spinner {
    width: 42px; height: 42px;
    border: 3px solid #333;
    border-top-color: #8b5cf6;
    border-radius: 50%;
    animation: spin 0.8s linear infinite;
  }
  @keyframes spin { to { transform: rotate(360deg); } }

  .error-panel { border-color: #ef4444; background: #1a1111; text-align: center; }
  .error-panel h2 { color: #fca5a5; }
  .error-panel p { color: #fecaca; white-space: pre-line; }

  footer { text-align: center; font-size: 0.75rem; color: #555; }
</style>
</head>
<body>
<main>
  <header>
    <h1>AI Prompt Enhancer Pro</h1>
    <p>Przekształć pomysły w arcydzieła promptów rastrowych (wyniki po angielsku)! Z __NUMBER_OF_QUESTIONS__ pytaniami (po polsku, pierwsze o styl!) i dynamicznymi opcjami, magicznymi promptami, kopią obrazu, wpływem stylu i możliwością edycji promptu!</p>
  </header>
  <div id="message"></div>
  <div id="content"></div>
  <footer>Powered by Gemini.</footer>
</main>

<script>
  const N = __NUMBER_OF_QUESTIONS__;
  const contentEl = document.getElementById('content');
  const messageEl = document.getElementById('message');
  let current = null;
  let pollTimer = null;
  let draft = '';

  const PROGRESS = {
    GENERATING_DESCRIPTION: ['Generowanie opisu z obrazu (po angielsku)...', 'Analizujemy Twój obraz, aby stworzyć szczegółowy opis w języku angielskim.'],
    GENERATING_QUESTIONS: ['Generowanie ' + N + ' Pytań i Opcji (po polsku)...', 'Przygotowujemy pytania (pierwsze o styl!) i dynamiczne sugestie odpowiedzi.'],
    GENERATING_ENHANCEMENT: ['Generowanie Ulepszonego Promptu (po angielsku)...', 'Łączymy Twoje odpowiedzi w potężny prompt o najwyższej jakości.'],
    GENERATING_MAGIC_PROMPT: ['Tworzenie Magicznego Promptu (po angielsku)...', 'Nasza AI kreatywnie rozwija Twój pomysł.'],
    GENERATING_COPY_PROMPT: ['Generowanie Promptu Kopiującego (po angielsku)...', 'Analizujemy obraz, aby stworzyć prompt do jego rekonstrukcji.'],
    GENERATING_STYLE_INFLUENCE_PROMPT: ['Analizowanie stylu i generowanie promptu (po angielsku)...', 'Nasza AI intensywnie myśli, proszę czekać...'],
    GENERATING_REFINEMENT: ['Poprawianie Twojego edytowanego promptu (po angielsku)...', 'AI analizuje Twoje zmiany i udoskonala prompt, zachowując kontekst.'],
  };

  function esc(text) {
    const div = document.createElement('div');
    div.textContent = text == null ? '' : String(text);
    return div.innerHTML;
  }

  function showMessage(text) {
    messageEl.innerHTML = text ? '<div class="message" role="alert">' + esc(text) + '</div>' : '';
  }

  // ── API helper ──
  async function api(method, url, body) {
    const opts = { method, headers: {} };
    if (body instanceof FormData) {
      opts.body = body;
    } else if (body !== undefined) {
      opts.headers['Content-Type'] = 'application/json';
      opts.body = JSON.stringify(body);
    }
    let data;
    try {
      const res = await fetch(url, opts);
      data = await res.json();
      if (!res.ok) {
        if (data.state) render(data.state);
        showMessage(data.error || 'HTTP ' + res.status);
        return null;
      }
    } catch (e) {
      showMessage('Brak połączenia z serwerem: ' + e.message);
      return null;
    }
    render(data);
    return data;
  }

  function formValues() {
    const idea = document.getElementById('idea');
    const ratio = document.getElementById('ratio');
    const values = {};
    if (idea) values.basicPrompt = idea.value;
    if (ratio) {
      values.aspectRatio = ratio.value;
      const w = document.getElementById('customWidth');
      const h = document.getElementById('customHeight');
      if (w) values.customWidth = w.value;
      if (h) values.customHeight = h.value;
    }
    return values;
  }

  async function generate(url, pendingState, body) {
    renderProgress(pendingState);
    showMessage('');
    await api('POST', url, body);
  }

  // ── Actions ──
  async function saveIdea() {
    const idea = document.getElementById('idea');
    if (idea && current && idea.value !== current.basicPrompt) {
      current.basicPrompt = idea.value;
      await fetch('/api/idea', {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ basicPrompt: idea.value }),
      });
    }
  }

  async function saveOutputSettings() {
    await saveIdea();
    const v = formValues();
    await api('POST', '/api/output-settings', {
      aspectRatio: v.aspectRatio, customWidth: v.customWidth || '', customHeight: v.customHeight || '',
    });
  }

  async function uploadImage(slot, input) {
    const file = input.files[0];
    if (!file) return;
    await saveIdea();
    const form = new FormData();
    form.append('file', file);
    await api('POST', '/api/images/' + slot, form);
  }

  async function clearImage(slot) {
    await saveIdea();
    await api('DELETE', '/api/images/' + slot);
  }

  async function describeImage() {
    await generate('/api/describe', 'GENERATING_DESCRIPTION');
  }

  async function submitIdea() { await generate('/api/questions', 'GENERATING_QUESTIONS', formValues()); }
  async function magicPrompt() { await generate('/api/magic', 'GENERATING_MAGIC_PROMPT', formValues()); }
  async function styleInfluence() { await generate('/api/style-influence', 'GENERATING_STYLE_INFLUENCE_PROMPT', formValues()); }

  async function copyImage() {
    if (current && current.state === 'INITIAL') await saveIdea();
    await generate('/api/copy-image', 'GENERATING_COPY_PROMPT');
  }

  async function toggleOption(id, option, checked) {
    await api('POST', '/api/answers', { id, option, checked });
  }

  async function saveNotes(id, answer) {
    await api('POST', '/api/answers', { id, answer });
  }

  async function submitAnswers() { await generate('/api/enhance', 'GENERATING_ENHANCEMENT'); }

  async function startEditing() {
    const data = await api('POST', '/api/edit');
    if (data) draft = data.draft;
    render(current);
  }

  async function cancelEditing() { draft = ''; await api('POST', '/api/edit/cancel'); }

  async function submitRefinement() {
    if (!draft.trim()) { showMessage('Edytowany prompt nie może być pusty.'); return; }
    await generate('/api/refine', 'GENERATING_REFINEMENT', { draft });
  }

  async function startOver() {
    draft = '';
    showMessage('');
    await api('POST', '/api/start-over');
  }

  async function copyText(button, text) {
    const label = button.textContent;
    try {
      await navigator.clipboard.writeText(text);
      button.textContent = 'Skopiowano!';
      setTimeout(() => button.textContent = label, 2000);
    } catch (e) {
      showMessage('Nie udało się skopiować tekstu do schowka.');
    }
  }

  // ── Rendering ──
  function render(s) {
    current = s;
    clearTimeout(pollTimer);
    if (s.isGenerating) {
      renderProgress(s.state);
      pollTimer = setTimeout(poll, 1500);
      return;
    }
    const inline = s.state === 'INITIAL' || s.state === 'ASKING_QUESTIONS' || (s.state === 'SHOWING_RESULTS' && s.editing);
    showMessage(inline ? s.message : '');
    if (s.state === 'INITIAL') renderInitial(s);
    else if (s.state === 'ASKING_QUESTIONS') renderQuestions(s);
    else if (s.state === 'SHOWING_RESULTS') renderResults(s);
    else if (s.state === 'ERROR') renderError(s);
  }

  async function poll() {
    try {
      const res = await fetch('/api/state');
      render(await res.json());
    } catch (e) {
      pollTimer = setTimeout(poll, 3000);
    }
  }

  function renderProgress(state) {
    const [title, text] = PROGRESS[state] || ['Przetwarzanie...', ''];
    contentEl.innerHTML =
      '<div class="loading" role="status" aria-live="polite"><div class="spinner"></div>' +
      '<div class="title">' + esc(title) + '</div><div>' + esc(text) + '</div></div>';
  }

  function imageSlot(s, slot, label, extra) {
    const img = s.images[slot];
    let html = '<div class="card"><label class="field" for="' + slot + 'File">' + label + '</label>' +
      '<input type="file" id="' + slot + 'File" accept="__ALLOWED_IMAGE_TYPES__" onchange="uploadImage(\'' + slot + '\', this)">';
    if (img) {
      html += '<div class="preview"><img src="' + img.preview + '" alt="' + esc(img.filename) + '">' +
        '<button class="secondary" onclick="clearImage(\'' + slot + '\')" aria-label="Usuń obraz">✕</button></div>' + (extra || '');
    }
    return html + '</div>';
  }

  function renderInitial(s) {
    const o = s.outputSettings;
    const hasIdea = s.basicPrompt.trim().length > 0;
    const subject = !!s.images.subject;
    const style = !!s.images.style;
    let html = '<h2>Ulepsz Swój Prompt Graficzny</h2>' +
      '<div class="card"><label class="field" for="idea">Twój podstawowy pomysł/prompt (opisuje GŁÓWNY TEMAT; może być po polsku lub angielsku)</label>' +
      '<textarea id="idea" rows="3" placeholder="Np. \'Astronauta na Marsie sadzący kwiaty\', \'Cyberpunkowe miasto nocą w deszczu\'">' + esc(s.basicPrompt) + '</textarea></div>';

    html += imageSlot(s, 'subject', 'Obraz Referencyjny (Temat/Obiekt - opcjonalny; max __MAX_IMAGE_SIZE_MB__MB)',
      '<div class="row"><button class="secondary" onclick="describeImage()">Generuj Opis Tematu (EN)</button>' +
      '<button class="secondary" onclick="copyImage()">🖼️ Skopiuj Obraz (EN)</button></div>');
    html += imageSlot(s, 'style', 'Obraz Stylu Referencyjnego (opcjonalny, dla funkcji \'Zastosuj Styl\'; max __MAX_IMAGE_SIZE_MB__MB)');

    html += '<div class="card"><h3>Ustawienia Wyjściowe (Opcjonalne)</h3>' +
      '<label class="field" for="ratio">Proporcje Obrazu</label>' +
      '<select id="ratio" onchange="saveOutputSettings()">/*__ASPECT_RATIOS__*/</select>';
    if (o.aspectRatio === 'custom') {
      html += '<div class="row"><div><label class="field" for="customWidth">Szerokość (px)</label>' +
        '<input type="number" id="customWidth" min="1" placeholder="np. 1024" value="' + esc(o.customWidth) + '" onchange="saveOutputSettings()"></div>' +
        '<div><label class="field" for="customHeight">Wysokość (px)</label>' +
        '<input type="number" id="customHeight" min="1" placeholder="np. 768" value="' + esc(o.customHeight) + '" onchange="saveOutputSettings()"></div></div>';
      if (s.customDimensionsInvalid) {
        html += '<p class="hint">Podaj prawidłowe, dodatnie wartości liczbowe dla szerokości i wysokości.</p>';
      }
    }
    html += '</div>';

    html += '<div class="row">' +
      '<button id="questionsBtn" onclick="submitIdea()"' + (hasIdea ? '' : ' disabled') + '>Ulepsz z ' + N + ' Pytaniami (PL)</button>' +
      '<button id="magicBtn" class="magic" onclick="magicPrompt()"' + (hasIdea && !s.customDimensionsInvalid ? '' : ' disabled') + '>✨ Magiczny Prompt (EN) ✨</button></div>' +
      '<button id="styleBtn" class="style wide" onclick="styleInfluence()"' +
      ((hasIdea || subject) && style && !s.customDimensionsInvalid ? '' : ' disabled') + '>🎨 Zastosuj Styl (EN) 🎨</button>';

    contentEl.innerHTML = html;
    document.getElementById('ratio').value = o.aspectRatio;

    const idea = document.getElementById('idea');
    idea.addEventListener('input', () => {
      const filled = idea.value.trim().length > 0;
      document.getElementById('questionsBtn').disabled = !filled;
      document.getElementById('magicBtn').disabled = !filled || s.customDimensionsInvalid;
      document.getElementById('styleBtn').disabled = !(filled || subject) || !style || s.customDimensionsInvalid;
    });
    idea.addEventListener('change', saveIdea);
  }

  function renderQuestions(s) {
    let html = '<h2>Odpowiedz na ' + N + ' Pytań (Pierwsze o Styl!)</h2>' +
      '<p class="field">Możesz pominąć pytania lub dodać własne notatki.</p>';
    s.questionAnswers.forEach((qa, i) => {
      html += '<fieldset class="card"><legend><h3>' + (i + 1) + '. ' + esc(qa.questionText) + '</h3></legend>';
      if (qa.options.length > 0) {
        html += '<div class="options">';
        qa.options.forEach((opt, j) => {
          const checked = qa.selectedOptions.includes(opt) ? ' checked' : '';
          html += '<label><input type="checkbox" data-q="' + esc(qa.id) + '" data-o="' + j + '"' + checked + '> ' + esc(opt) + '</label>';
        });
        html += '</div>';
      } else {
        html += '<p class="field">To pytanie nie ma predefiniowanych opcji. Proszę użyć pola notatek poniżej, jeśli dotyczy.</p>';
      }
      html += '<textarea rows="2" data-notes="' + esc(qa.id) + '" placeholder="Twoje dodatkowe uwagi do tego pytania...">' + esc(qa.answer) + '</textarea></fieldset>';
    });
    html += '<button class="wide" onclick="submitAnswers()">Generuj Ulepszony Prompt (EN)</button>';
    if (s.images.subject) html += '<button class="secondary wide" onclick="copyImage()">🖼️ Skopiuj Obraz (EN)</button>';
    html += '<button class="secondary wide" onclick="startOver()">Zacznij od Nowa</button>';
    contentEl.innerHTML = html;

    contentEl.querySelectorAll('input[type=checkbox]').forEach(box => {
      box.addEventListener('change', () => {
        const qa = s.questionAnswers.find(q => q.id === box.dataset.q);
        toggleOption(qa.id, qa.options[Number(box.dataset.o)], box.checked);
      });
    });
    contentEl.querySelectorAll('textarea[data-notes]').forEach(area => {
      area.addEventListener('change', () => saveNotes(area.dataset.notes, area.value));
    });
  }

  function renderResults(s) {
    const r = s.result;
    if (!r) { contentEl.innerHTML = '<p>Brak wyników do wyświetlenia.</p>'; return; }
    let html = '<h2>Twój Ulepszony Prompt (po Angielsku)!</h2><div class="card"><h3>Ulepszony Prompt Główny (Enhanced Main Prompt - English):</h3>';
    if (s.editing) {
      if (!draft) draft = s.draft;
      html += '<textarea id="draft" rows="6" aria-label="Edytuj ulepszony prompt główny">' + esc(draft) + '</textarea>' +
        '<div class="row"><button id="refineBtn" onclick="submitRefinement()">Zapisz i Popraw Prompt</button>' +
        '<button class="secondary" onclick="cancelEditing()">Anuluj Edycję</button></div>';
    } else {
      html += '<pre class="output">' + esc(r.enhancedPrompt) + '</pre>' +
        '<div class="row"><button class="secondary" onclick="startEditing()">Edytuj Główny Prompt</button>' +
        '<button class="secondary" id="copyMain">Kopiuj Prompt Główny</button></div>';
    }
    html += '</div><div class="card"><h3>Prompt Negatywny (Negative Prompt - English):</h3>' +
      '<pre class="output">' + esc(r.negativePrompt) + '</pre>' +
      '<button class="secondary" id="copyNegative">Kopiuj Prompt Negatywny</button></div>';
    if (r.suggestions.length > 0) {
      html += '<div class="card"><h3>Sugestie Dalszych Ulepszeń (Further Suggestions - English):</h3>';
      r.suggestions.forEach((sug, i) => {
        html += '<pre class="output">' + esc(sug) + '</pre><button class="secondary" data-suggestion="' + i + '">Kopiuj Sugestię ' + (i + 1) + '</button>';
      });
      html += '</div>';
    }
    html += '<p class="field" style="text-align:center">Typ promptu: ' +
      (r.outputTypeUsed === 'RASTER_PROMPT' ? 'Prompt Rastrowy (np. dla DALL-E, Midjourney, Stable Diffusion)' : 'Nieznany typ') + '</p>' +
      '<button class="wide" onclick="startOver()">Zacznij od Nowa</button>';
    contentEl.innerHTML = html;

    const draftEl = document.getElementById('draft');
    if (draftEl) {
      draftEl.addEventListener('input', () => {
        draft = draftEl.value;
        document.getElementById('refineBtn').disabled = !draft.trim();
      });
    }
    const copyMain = document.getElementById('copyMain');
    if (copyMain) copyMain.addEventListener('click', () => copyText(copyMain, r.enhancedPrompt));
    const copyNegative = document.getElementById('copyNegative');
    copyNegative.addEventListener('click', () => copyText(copyNegative, r.negativePrompt));
    contentEl.querySelectorAll('button[data-suggestion]').forEach(btn => {
      btn.addEventListener('click', () => copyText(btn, r.suggestions[Number(btn.dataset.suggestion)]));
    });
  }

  function renderError(s) {
    contentEl.innerHTML = '<div class="card error-panel" role="alert"><h2>Wystąpił Błąd</h2>' +
      '<p>' + esc(s.error || 'Napotkano nieoczekiwany problem.') + '</p>' +
      '<button class="secondary" onclick="startOver()"' + (s.configured ? '' : ' disabled') + '>Spróbuj Ponownie</button></div>';
  }

  poll();
</script>
</body>
</html>
"""


if __name__ == "__main__":
    app.run(host=config.HOST, port=config.PORT, debug=False, threaded=True)
