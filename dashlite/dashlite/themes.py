import plotly.graph_objects as go
import plotly.io as pio

from .constants import PALETTES

NEON_TEMPLATE = "dashlite_neon"

pio.templates[NEON_TEMPLATE] = go.layout.Template(
    layout=dict(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color="#94a3b8", size=12),
        colorway=PALETTES["Neon"],
        xaxis=dict(
            gridcolor="rgba(255,255,255,0.05)",
            linecolor="rgba(0,242,255,0.2)",
        ),
        yaxis=dict(
            gridcolor="rgba(255,255,255,0.05)",
            griddash="dash",
        ),
        margin=dict(t=40, l=40, r=40, b=40),
    )
)

THEMES = {
    "Neon (Dark)": f"plotly_dark+{NEON_TEMPLATE}",
    "Plotly (Light)": "plotly",
    "Simple White": "simple_white",
}


def set_theme(name: str):
    tmpl = THEMES.get(name, THEMES["Neon (Dark)"])
    pio.templates.default = tmpl
    return tmpl
