"""
Inspiration templates.

Ready-made component ideas whose HTML can be generated on demand and then
loaded into remix mode as the base or the style source.
"""

from dataclasses import dataclass
from typing import Optional

from shared.logging import get_logger

from .adapters import GenerationAdapters
from .models import VisualStyle

log = get_logger("studio", "templates")


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    prompt: str
    style: VisualStyle

    def build_prompt(self) -> str:
        return (
            f"{self.prompt}\n\n"
            f'Ensure the generated component is visually complete and styled according '
            f'to the "{self.style.value}" aesthetic.'
        )


TEMPLATES: tuple[Template, ...] = (
    Template(
        id="login-form",
        name="Minimalist Login Form",
        prompt="A clean, simple login form with email, password fields, and a submit button.",
        style=VisualStyle.MINIMALIST,
    ),
    Template(
        id="product-card",
        name="Cyberpunk Product Card",
        prompt="A futuristic product card with a holographic image placeholder, glowing text, and sharp angles.",
        style=VisualStyle.CYBERPUNK,
    ),
    Template(
        id="pricing-table",
        name="Corporate Pricing Table",
        prompt=(
            "A professional pricing table with three tiers (Basic, Pro, Enterprise), "
            "feature lists, and clear call-to-action buttons."
        ),
        style=VisualStyle.CORPORATE,
    ),
    Template(
        id="user-profile",
        name="Playful User Profile",
        prompt="A fun user profile card with a circular avatar, progress bars for stats, and bright, cheerful colors.",
        style=VisualStyle.PLAYFUL,
    ),
    Template(
        id="nav-bar",
        name="Glassmorphism Nav Bar",
        prompt="A translucent navigation bar with frosted glass effect, containing a logo and several navigation links.",
        style=VisualStyle.GLASSMORPHISM,
    ),
    Template(
        id="testimonial-card",
        name="Vintage Testimonial Card",
        prompt="A retro-styled testimonial card featuring a user photo, quote, and name in a classic serif font.",
        style=VisualStyle.VINTAGE,
    ),
)


class TemplateGallery:
    """Generates and caches template HTML, one template at a time per id."""

    def __init__(self, adapters: GenerationAdapters, templates: tuple[Template, ...] = TEMPLATES):
        self.adapters = adapters
        self.templates = {t.id: t for t in templates}
        self.generated: dict[str, str] = {}
        self.loading: dict[str, bool] = {t.id: False for t in templates}

    def get(self, template_id: str) -> Template:
        try:
            return self.templates[template_id]
        except KeyError:
            raise KeyError(f"unknown template: {template_id}") from None

    def html_for(self, template_id: str) -> Optional[str]:
        return self.generated.get(template_id)

    async def generate(self, template_id: str) -> str:
        """
        Generate (or regenerate) a template's HTML.

        Raises:
            KeyError: unknown template
            Exception: whatever the adapter raised; the loading flag is cleared
        """
        template = self.get(template_id)
        self.loading[template_id] = True
        try:
            html = await self.adapters.synthesize_html(template.build_prompt())
        except Exception as e:
            log.exception(e, "studio.templates.generate_failed", {"template_id": template_id})
            raise
        finally:
            self.loading[template_id] = False

        self.generated[template_id] = html
        log.info("studio.templates.generated", template_id=template_id, html_length=len(html))
        return html
