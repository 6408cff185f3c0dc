"""
Tests for studio/modes.py
"""

import pytest

from studio.errors import ValidationError
from studio.models import (
    Channel,
    CloneInput,
    DescriptionInput,
    ImageAttachment,
    Mode,
    ModifyInput,
    VisualStyle,
)
from studio.modes import (
    MODE_DESCRIPTORS,
    TOO_MANY_SCREENSHOTS,
    build_input,
    descriptor_for,
    validate,
    with_field,
)


class TestDescriptors:
    """Tests for the static mode table."""

    def test_every_mode_described(self):
        assert set(MODE_DESCRIPTORS) == set(Mode)

    def test_channels_per_mode(self):
        assert descriptor_for(Mode.DESCRIPTION).channels == (Channel.PROMPT, Channel.IMAGE, Channel.HTML)
        assert descriptor_for(Mode.MODIFY).channels == (Channel.HTML,)
        assert descriptor_for(Mode.CLONE).channels == (Channel.HTML,)

    def test_field_names(self):
        assert descriptor_for("description").field_names == ("text", "style")
        assert descriptor_for(Mode.MODIFY).field_names == ("base_html", "style_html")
        assert descriptor_for(Mode.CLONE).field_names == ("url", "screenshots")


class TestValidate:
    """Tests for input validation."""

    def test_description_ok(self):
        validate(DescriptionInput(text="music dashboard", style=VisualStyle.CYBERPUNK))

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_description_blank_text(self, text):
        with pytest.raises(ValidationError) as exc:
            validate(DescriptionInput(text=text))
        assert exc.value.message == "Please describe your UI idea."
        assert exc.value.field == "text"
        assert exc.value.mode == Mode.DESCRIPTION

    def test_modify_ok(self):
        validate(ModifyInput(base_html="<div>a</div>", style_html="<div class='x'>b</div>"))

    @pytest.mark.parametrize("base,style,field", [
        ("", "<b>", "base_html"),
        ("<a>", " ", "style_html"),
        ("", "", "base_html"),
    ])
    def test_modify_requires_both(self, base, style, field):
        with pytest.raises(ValidationError) as exc:
            validate(ModifyInput(base_html=base, style_html=style))
        assert exc.value.field == field
        assert "both" in exc.value.message

    def test_clone_url_only(self):
        validate(CloneInput(url="https://example.com"))

    def test_clone_screenshots_only(self, screenshot):
        validate(CloneInput(screenshots=(screenshot,)))

    def test_clone_needs_url_or_screenshot(self):
        with pytest.raises(ValidationError) as exc:
            validate(CloneInput(url="  "))
        assert exc.value.message == "Please provide a URL or at least one screenshot."

    def test_clone_at_most_three_screenshots(self, screenshot):
        validate(CloneInput(screenshots=(screenshot,) * 3))
        with pytest.raises(ValidationError) as exc:
            validate(CloneInput(url="https://x", screenshots=(screenshot,) * 4))
        assert exc.value.message == TOO_MANY_SCREENSHOTS

    def test_rejects_non_input(self):
        with pytest.raises(TypeError):
            validate("not an input")


class TestBuildInput:
    """Tests for building and editing inputs from raw values."""

    def test_build_description_coerces_style(self):
        run_input = build_input("description", text="login", style="Cyberpunk")
        assert run_input == DescriptionInput(text="login", style=VisualStyle.CYBERPUNK)

    def test_build_missing_fields_take_defaults(self):
        assert build_input(Mode.MODIFY, base_html="<a>") == ModifyInput(base_html="<a>", style_html="")

    def test_build_unknown_field(self):
        with pytest.raises(ValueError):
            build_input(Mode.CLONE, style="Minimalist")

    def test_build_clone_accepts_dict_screenshots(self):
        run_input = build_input(Mode.CLONE, screenshots=[{"data": "AA==", "media_type": "image/jpeg"}])
        assert run_input.screenshots == (ImageAttachment("AA==", "image/jpeg"),)

    def test_with_field_returns_copy(self):
        original = DescriptionInput(text="a")
        updated = with_field(original, "text", "b")
        assert original.text == "a"
        assert updated.text == "b"

    def test_with_field_wrong_mode(self):
        with pytest.raises(ValueError):
            with_field(ModifyInput(), "text", "hello")

    def test_with_field_bad_style(self):
        with pytest.raises(ValueError):
            with_field(DescriptionInput(), "style", "Baroque")
