"""
Static theme registry.

Every theme the blog can wear is declared here once, at import time. The
registry is read-only; the active theme lives in a ThemeContext, not here.
"""

from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_THEME = "beach"

_UNSPLASH = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=2070&q=80"

SANS = "'Inter', 'Segoe UI', sans-serif"
SERIF = "'Playfair Display', 'Georgia', serif"
MONO = "'JetBrains Mono', 'Courier New', monospace"


class ThemeDescriptor(BaseModel):
    """Display attributes for one theme. Opaque to everything but the renderer."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    name: str
    description: str = Field(..., description="One-line semantics used in prompts")
    background: str
    background_image: str
    text: str
    card: str
    header: str
    accent: str
    font: str
    body_font: str
    text_shadow: str
    button: str
    overlay: str


def _theme(identifier: str, **attrs: str) -> tuple[str, ThemeDescriptor]:
    return identifier, ThemeDescriptor(identifier=identifier, **attrs)


THEMES: MappingProxyType[str, ThemeDescriptor] = MappingProxyType(
    dict(
        [
            _theme(
                "beach",
                name="Beach",
                description="uplifting, calming, positive energy - use for sad, stressed, anxious moods",
                background="bg-gradient-to-br from-cyan-200 via-blue-300 to-blue-500",
                background_image=_UNSPLASH.format("1507525428034-b723cf961d3e"),
                text="text-blue-900",
                card="bg-white/85 backdrop-blur-sm border-blue-200",
                header="bg-white/90 backdrop-blur-md border-blue-200",
                accent="text-blue-600 hover:text-blue-800",
                font="font-sans",
                body_font=SANS,
                text_shadow="drop-shadow-sm",
                button="bg-blue-500 hover:bg-blue-600 text-white",
                overlay="bg-blue-50/70",
            ),
            _theme(
                "autumn",
                name="Autumn",
                description="cozy, warm, comforting - use for lonely, cold, disconnected feelings",
                background="bg-gradient-to-br from-orange-400 via-red-500 to-amber-600",
                background_image=_UNSPLASH.format("1507041957456-9c397ce39c97"),
                text="text-amber-50",
                card="bg-amber-900/80 backdrop-blur-sm border-orange-500",
                header="bg-orange-900/90 backdrop-blur-md border-orange-500",
                accent="text-amber-300 hover:text-amber-200",
                font="font-serif",
                body_font=SERIF,
                text_shadow="drop-shadow-md",
                button="bg-orange-600 hover:bg-orange-700 text-white",
                overlay="bg-orange-900/50",
            ),
            _theme(
                "space",
                name="Space",
                description="inspiring, vast, perspective - use for feeling stuck, small, limited",
                background="bg-gradient-to-br from-purple-900 via-blue-900 to-black",
                background_image=_UNSPLASH.format("1446776877081-d282a0f896e2"),
                text="text-white",
                card="bg-gray-800/80 backdrop-blur-sm border-purple-500",
                header="bg-gray-900/90 backdrop-blur-md border-purple-500",
                accent="text-purple-400 hover:text-purple-300",
                font="font-mono",
                body_font=MONO,
                text_shadow="drop-shadow-lg",
                button="bg-purple-600 hover:bg-purple-700 text-white",
                overlay="bg-black/60",
            ),
            _theme(
                "dark",
                name="Dark Serious",
                description="professional, focused, serious - use for playful moods that need focus",
                background="bg-gradient-to-br from-gray-900 via-gray-800 to-black",
                background_image=_UNSPLASH.format("1518837695005-2083093ee35b"),
                text="text-gray-100",
                card="bg-gray-800/90 backdrop-blur-sm border-gray-600",
                header="bg-black/90 backdrop-blur-md border-gray-700",
                accent="text-gray-300 hover:text-white",
                font="font-sans",
                body_font=SANS,
                text_shadow="drop-shadow-md",
                button="bg-gray-700 hover:bg-gray-600 text-white",
                overlay="bg-black/70",
            ),
            _theme(
                "desert",
                name="Desert",
                description="minimalist, peaceful, zen - use for chaotic, overwhelmed, cluttered mental states",
                background="bg-gradient-to-br from-yellow-400 via-orange-500 to-red-600",
                background_image=_UNSPLASH.format("1509316975850-ff9c5deb0cd9"),
                text="text-amber-900",
                card="bg-yellow-100/80 backdrop-blur-sm border-yellow-400",
                header="bg-yellow-200/90 backdrop-blur-md border-yellow-500",
                accent="text-orange-700 hover:text-red-700",
                font="font-serif",
                body_font=SERIF,
                text_shadow="drop-shadow-sm",
                button="bg-orange-500 hover:bg-orange-600 text-white",
                overlay="bg-yellow-200/60",
            ),
            _theme(
                "pastel",
                name="Pastel",
                description="gentle, soothing, soft - use for angry, harsh, aggressive feelings",
                background="bg-gradient-to-br from-pink-200 via-purple-200 to-indigo-200",
                background_image=_UNSPLASH.format("1557682224-5b8590cd9ec5"),
                text="text-gray-700",
                card="bg-white/80 backdrop-blur-sm border-pink-200",
                header="bg-pink-50/90 backdrop-blur-md border-pink-200",
                accent="text-purple-600 hover:text-purple-800",
                font="font-sans",
                body_font=SANS,
                text_shadow="drop-shadow-sm",
                button="bg-pink-400 hover:bg-pink-500 text-white",
                overlay="bg-white/40",
            ),
            _theme(
                "corporate",
                name="Corporate",
                description="professional, business-like, clean - use for casual moods that need structure",
                background="bg-gradient-to-br from-slate-800 via-gray-700 to-blue-900",
                background_image=_UNSPLASH.format("1486406146926-c627a92ad1ab"),
                text="text-slate-100",
                card="bg-slate-800/85 backdrop-blur-sm border-slate-600",
                header="bg-slate-900/95 backdrop-blur-md border-slate-700",
                accent="text-blue-400 hover:text-blue-300",
                font="font-sans",
                body_font=SANS,
                text_shadow="drop-shadow-md",
                button="bg-blue-600 hover:bg-blue-700 text-white",
                overlay="bg-slate-900/60",
            ),
            _theme(
                "festive",
                name="Festive",
                description="celebration, joy, holiday spirit - use for boring, mundane, routine feelings",
                background="bg-gradient-to-br from-red-500 via-green-500 to-yellow-500",
                background_image=_UNSPLASH.format("1482517967863-00e15c9b44be"),
                text="text-white",
                card="bg-red-800/80 backdrop-blur-sm border-yellow-400",
                header="bg-red-900/90 backdrop-blur-md border-yellow-400",
                accent="text-yellow-300 hover:text-yellow-200",
                font="font-serif",
                body_font=SERIF,
                text_shadow="drop-shadow-lg",
                button="bg-green-600 hover:bg-green-700 text-white",
                overlay="bg-red-900/50",
            ),
            _theme(
                "kids",
                name="Kids",
                description="playful, colorful, fun - use for serious, adult, rigid moods that need lightening",
                background="bg-gradient-to-br from-yellow-300 via-pink-400 to-blue-400",
                background_image=_UNSPLASH.format("1513475382585-d06e58bcb0e0"),
                text="text-gray-800",
                card="bg-white/85 backdrop-blur-sm border-pink-300",
                header="bg-yellow-200/90 backdrop-blur-md border-pink-300",
                accent="text-pink-600 hover:text-pink-800",
                font="font-comic",
                body_font='"Comic Sans MS", "Inter", cursive',
                text_shadow="drop-shadow-sm",
                button="bg-pink-500 hover:bg-pink-600 text-white",
                overlay="bg-yellow-100/60",
            ),
            _theme(
                "rainforest",
                name="Rainforest",
                description="natural, lush, alive - use for urban fatigue, tech overwhelm, disconnection from nature",
                background="bg-gradient-to-br from-green-800 via-emerald-700 to-teal-600",
                background_image=_UNSPLASH.format("1441974231531-c6227db76b6e"),
                text="text-green-50",
                card="bg-green-900/80 backdrop-blur-sm border-emerald-500",
                header="bg-green-950/90 backdrop-blur-md border-emerald-600",
                accent="text-emerald-300 hover:text-emerald-200",
                font="font-serif",
                body_font=SERIF,
                text_shadow="drop-shadow-md",
                button="bg-emerald-600 hover:bg-emerald-700 text-white",
                overlay="bg-green-900/70",
            ),
        ]
    )
)

# Moods each theme counterbalances. Declaration order breaks scoring ties.
THEME_TRIGGERS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "beach": ("sad", "depressed", "down", "anxious", "worried"),
        "pastel": ("angry", "mad", "frustrated", "harsh", "critical"),
        "desert": ("overwhelmed", "chaotic", "stressed", "cluttered", "panic"),
        "autumn": ("lonely", "isolated", "cold"),
        "space": ("small", "insignificant", "stuck", "limited"),
        "dark": ("unfocused", "distracted", "playful", "work", "serious", "professional"),
        "corporate": ("casual", "unstructured", "messy", "disorganized"),
        "festive": ("bored", "routine", "mundane", "dull", "monotonous"),
        "kids": ("rigid", "uptight", "formal", "stiff", "adult"),
        "rainforest": ("urban", "tech", "digital", "artificial", "disconnected"),
    }
)


def is_theme(identifier: str | None) -> bool:
    """Return True if identifier names a registered theme."""
    return identifier is not None and identifier in THEMES


def get_theme(identifier: str | None) -> ThemeDescriptor:
    """Look up a descriptor, falling back to the default theme."""
    if is_theme(identifier):
        return THEMES[identifier]
    return THEMES[DEFAULT_THEME]
