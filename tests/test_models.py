from models import (
    ASPECT_RATIO_CUSTOM,
    IPHONE_WALLPAPER,
    InteractionState,
    OutputSettings,
    QuestionAnswer,
)


def make_qa():
    return QuestionAnswer(id="q1", question_text="Styl?", options=["Akwarela", "Szkic"])


def test_toggle_is_idempotent():
    qa = make_qa()
    qa.toggle("Akwarela", True)
    qa.toggle("Akwarela", True)
    assert qa.selected_options == ["Akwarela"]
    qa.toggle("Akwarela", False)
    qa.toggle("Akwarela", False)
    assert qa.selected_options == []


def test_selection_keeps_click_order():
    qa = make_qa()
    qa.toggle("Szkic", True)
    qa.toggle("Akwarela", True)
    assert qa.to_dict()["selectedOptions"] == ["Szkic", "Akwarela"]


def test_non_custom_ratios_are_always_valid():
    assert OutputSettings().dimensions_valid()
    assert OutputSettings("16:9", "", "").dimensions_valid()


def test_custom_dimensions_must_be_positive_integers():
    assert not OutputSettings(ASPECT_RATIO_CUSTOM, "0", "100").dimensions_valid()
    assert not OutputSettings(ASPECT_RATIO_CUSTOM, "", "768").dimensions_valid()
    assert not OutputSettings(ASPECT_RATIO_CUSTOM, "abc", "768").dimensions_valid()
    assert not OutputSettings(ASPECT_RATIO_CUSTOM, "-5", "768").dimensions_valid()
    assert OutputSettings(ASPECT_RATIO_CUSTOM, "1024", "768").dimensions_valid()


def test_wallpaper_preset_resolves_to_pixels():
    assert OutputSettings(IPHONE_WALLPAPER).resolved() == ("custom", "1170", "2532")
    assert OutputSettings("4:3", "1", "2").resolved() == ("4:3", "1", "2")


def test_generating_states():
    generating = {s for s in InteractionState if s.is_generating}
    assert len(generating) == 7
    assert InteractionState.ASKING_QUESTIONS not in generating
    assert InteractionState.GENERATING_REFINEMENT in generating


def test_custom_dimensions_reject_python_number_syntax():
    assert not OutputSettings(ASPECT_RATIO_CUSTOM, "1_000", "768").dimensions_valid()
    assert not OutputSettings(ASPECT_RATIO_CUSTOM, "+5", "768").dimensions_valid()
    assert not OutputSettings(ASPECT_RATIO_CUSTOM, "1024", "7.5").dimensions_valid()


def test_custom_dimensions_are_normalised_when_resolved():
    settings = OutputSettings(ASPECT_RATIO_CUSTOM, " 1024 ", "0768")
    assert settings.resolved() == ("custom", "1024", "768")
