"""
Mode descriptors: input fields, validation rules and output channels per mode.
"""

from dataclasses import dataclass, fields as dataclass_fields, replace
from typing import Any

from .errors import ValidationError
from .models import (
    Channel,
    CloneInput,
    DescriptionInput,
    ImageAttachment,
    INPUT_TYPES,
    MAX_SCREENSHOTS,
    Mode,
    ModifyInput,
    RunInput,
    VisualStyle,
)


@dataclass(frozen=True)
class FieldSpec:
    """One user-editable input field."""
    name: str
    label: str
    required: bool = True


@dataclass(frozen=True)
class ModeDescriptor:
    """Static definition of a mode."""
    mode: Mode
    label: str
    fields: tuple[FieldSpec, ...]
    channels: tuple[Channel, ...]
    # Shown when required input is missing
    missing_message: str

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


MODE_DESCRIPTORS: dict[Mode, ModeDescriptor] = {
    Mode.DESCRIPTION: ModeDescriptor(
        mode=Mode.DESCRIPTION,
        label="Describe",
        fields=(
            FieldSpec("text", "UI description"),
            FieldSpec("style", "Visual style"),
        ),
        channels=(Channel.PROMPT, Channel.IMAGE, Channel.HTML),
        missing_message="Please describe your UI idea.",
    ),
    Mode.MODIFY: ModeDescriptor(
        mode=Mode.MODIFY,
        label="Remix",
        fields=(
            FieldSpec("base_html", "Your HTML"),
            FieldSpec("style_html", "HTML to clone the style from"),
        ),
        channels=(Channel.HTML,),
        missing_message="Please provide both your existing HTML and the HTML to clone the style from.",
    ),
    Mode.CLONE: ModeDescriptor(
        mode=Mode.CLONE,
        label="Clone",
        # Either one is enough; validate() enforces the pair
        fields=(
            FieldSpec("url", "Page URL", required=False),
            FieldSpec("screenshots", "Screenshots", required=False),
        ),
        channels=(Channel.HTML,),
        missing_message="Please provide a URL or at least one screenshot.",
    ),
}

TOO_MANY_SCREENSHOTS = f"Please provide at most {MAX_SCREENSHOTS} screenshots."


def descriptor_for(mode: Mode) -> ModeDescriptor:
    """Look up the descriptor for a mode (accepts the string value too)."""
    return MODE_DESCRIPTORS[Mode(mode)]


def _blank(value: str) -> bool:
    return not value or not value.strip()


def validate(run_input: RunInput) -> None:
    """
    Reject inputs whose required fields are empty.

    Raises:
        ValidationError: with the mode's fixed user-facing message
    """
    if not isinstance(run_input, tuple(INPUT_TYPES.values())):
        raise TypeError(f"not a run input: {run_input!r}")
    descriptor = descriptor_for(run_input.mode)

    if isinstance(run_input, DescriptionInput):
        if _blank(run_input.text):
            raise ValidationError(run_input.mode, descriptor.missing_message, field="text")
        if not isinstance(run_input.style, VisualStyle):
            raise ValidationError(run_input.mode, f"Unknown visual style: {run_input.style}", field="style")

    elif isinstance(run_input, ModifyInput):
        for name in ("base_html", "style_html"):
            if _blank(getattr(run_input, name)):
                raise ValidationError(run_input.mode, descriptor.missing_message, field=name)

    elif isinstance(run_input, CloneInput):
        if len(run_input.screenshots) > MAX_SCREENSHOTS:
            raise ValidationError(run_input.mode, TOO_MANY_SCREENSHOTS, field="screenshots")
        if _blank(run_input.url) and not run_input.screenshots:
            raise ValidationError(run_input.mode, descriptor.missing_message, field="url")


def coerce_field(mode: Mode, name: str, value: Any) -> Any:
    """Convert a raw field value into the type the mode's input expects."""
    descriptor = descriptor_for(mode)
    if name not in descriptor.field_names:
        raise ValueError(f"{descriptor.mode.value} mode has no field {name!r}")

    if name == "style":
        return VisualStyle(value)
    if name == "screenshots":
        return tuple(
            s if isinstance(s, ImageAttachment) else ImageAttachment.from_dict(s)
            for s in (value or ())
        )
    return "" if value is None else str(value)


def with_field(run_input: RunInput, name: str, value: Any) -> RunInput:
    """Return a copy of run_input with one field replaced."""
    return replace(run_input, **{name: coerce_field(run_input.mode, name, value)})


def build_input(mode: Mode, **values: Any) -> RunInput:
    """
    Build a run input for a mode from raw field values.

    Unknown field names raise ValueError; missing ones take mode defaults.
    """
    mode = Mode(mode)
    input_type = INPUT_TYPES[mode]
    known = {f.name for f in dataclass_fields(input_type)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"{mode.value} mode has no field(s): {', '.join(sorted(unknown))}")
    return input_type(**{k: coerce_field(mode, k, v) for k, v in values.items()})
