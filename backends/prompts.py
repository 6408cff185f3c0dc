"""
Instructions sent to the Gemini models.
"""

from studio.models import VisualStyle


def enhance_prompt(text: str, style: VisualStyle) -> str:
    return f"""
You are a UI/UX designer and prompt engineer. Expand the user's short description
of an interface into a detailed, structured prompt for an image model that will
render a high-fidelity UI mockup.

The user wants a UI for: "{text}"
The desired visual style is: "{style.value}"

Use a markdown heading for each section:
## Overall Vibe & Style
## Color Palette (include hex codes)
## Typography
## Layout & Composition
## Key UI Components
## Iconography
## Micro-interactions & Animations (Subtle)

Respond ONLY with the prompt, starting at "## Overall Vibe & Style".
"""


def image_prompt(prompt: str) -> str:
    return (
        "A high-fidelity UI mockup for a web/mobile application, embodying the following "
        "detailed description. UI design, UX, user interface.\n\n" + prompt
    )


def html_from_prompt(prompt: str) -> str:
    return f"""
You are a front-end developer specialising in Tailwind CSS and accessibility.
Convert the UI description below into one self-contained, responsive, accessible
HTML snippet styled only with Tailwind CSS classes (no <style> blocks, no inline
styles). Use semantic elements, ARIA attributes where needed and alt text on
every image; use placeholder images for imagery.

---
{prompt}
---

Return ONLY the HTML.
"""


def restyle_html(base_html: str, style_html: str) -> str:
    return f"""
You are a front-end developer specialising in Tailwind CSS and accessibility.
Restyle the ORIGINAL HTML so it looks like the STYLE HTML. Keep the original's
content and structure, fix its accessibility problems, and express the new look
only through Tailwind CSS classes. Do not use content from the STYLE HTML.

ORIGINAL HTML:
```html
{base_html}
```

STYLE HTML:
```html
{style_html}
```

Return ONLY the complete restyled HTML.
"""


def clone_page(url: str, screenshot_count: int) -> str:
    sources = []
    if url:
        sources.append(f"the live page at {url} (look it up)")
    if screenshot_count:
        sources.append(f"the {screenshot_count} attached screenshot(s)")
    return f"""
You are a front-end developer specialising in Tailwind CSS and accessibility.
Recreate the user interface shown by {" and ".join(sources)} as one self-contained,
responsive, accessible HTML snippet styled only with Tailwind CSS classes.
Reproduce layout, colours, typography and content as faithfully as possible.

Return ONLY the HTML.
"""
