"""
Streamlit Dashboard — RetroGen Pixel Sprite Generator

Two-panel layout:
  A) Sprite Config — subject, props toggle, background & style options, error banner
  B) Preview Canvas — strict 256×256 nearest-neighbor preview, download / discard

Sidebar: model config, style rules applied to the last request, palette check.
"""

from __future__ import annotations

import streamlit as st

from config import settings
from generator.state import (
    MAX_BANDS,
    MAX_COLORS,
    MIN_BANDS,
    MIN_COLORS,
    BackgroundType,
    BandOrientation,
    Resolution,
)
from gemini.client import SpriteClient
from session import SpriteSession, queue_request, run_pending

RESOLUTION_LABELS = {
    Resolution.MACRO: "64x64 (Macro)",
    Resolution.RETRO: "128x128 (Retro)",
    Resolution.SHARP: "256x256 (Sharp)",
}

BACKGROUND_LABELS = {
    BackgroundType.SOLID: "Solid Color",
    BackgroundType.BANDS: "Striped Bands",
}


# ── Page Config ──────────────────────────────────────────────────────
st.set_page_config(
    page_title="RetroGen — Pixel Sprite Generator",
    page_icon="🎮",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── Custom CSS ───────────────────────────────────────────────────────
st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Press+Start+2P&family=Inter:wght@400;600;700&display=swap');

    .stApp {
        font-family: 'Inter', sans-serif;
    }

    .main-header {
        background: linear-gradient(135deg, #0f172a, #1e1b4b);
        padding: 1.5rem 2rem;
        border-radius: 12px;
        margin-bottom: 1.5rem;
        color: white;
    }

    .main-header h1 {
        margin: 0;
        font-family: 'Press Start 2P', monospace;
        font-size: 1.4rem;
        color: #ffffff;
    }

    .main-header h1 span { color: #818cf8; }

    .main-header p {
        margin: 0.6rem 0 0 0;
        color: #94a3b8;
        font-size: 0.9rem;
    }

    .panel-title {
        color: #cbd5e1;
        font-size: 0.85rem;
        font-weight: 600;
        text-transform: uppercase;
        letter-spacing: 0.05em;
        margin-bottom: 0.75rem;
    }

    .stImage img {
        image-rendering: pixelated;
    }

    .rule-item {
        color: #64748b;
        font-size: 0.85rem;
        margin: 0.3rem 0;
    }

    .rule-item::before {
        content: "●";
        color: #22c55e;
        margin-right: 0.5rem;
    }
</style>
""", unsafe_allow_html=True)


# ── Session State Initialization ─────────────────────────────────────

def init_session_state():
    """Initialize all Streamlit session state variables."""
    defaults = {
        "sprite_session": None,
        "error_message": None,
        "generating": False,       # set by the Generate click, cleared after the request
        "pending_options": None,
    }
    for key, val in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = val


def get_sprite_session():
    """Lazily build the Gemini client and session (needs GEMINI_API_KEY)."""
    if st.session_state.sprite_session is None:
        st.session_state.sprite_session = SpriteSession(client=SpriteClient())
    return st.session_state.sprite_session


def request_generate():
    """on_click for Generate: runs before the rerun, so the form renders disabled."""
    queue_request(st.session_state)


init_session_state()
sprite_session = st.session_state.sprite_session
state = sprite_session.state if sprite_session else None
is_loading = st.session_state.generating


# ── Header ───────────────────────────────────────────────────────────

st.markdown("""
<div class="main-header">
    <h1>🎮 Retro<span>Gen</span></h1>
    <p>Generate ultra-clean, strict pixel art sprites for your retro games.
    No dithering, no blur, just pure pixels.</p>
</div>
""", unsafe_allow_html=True)


# ── Sidebar ──────────────────────────────────────────────────────────

with st.sidebar:
    st.markdown("### 🤖 Model Config")
    st.caption(f"**Model:** {settings.IMAGE_MODEL}")
    st.caption(f"**Aspect ratio:** {settings.ASPECT_RATIO}")
    st.caption(f"**Canvas:** {settings.CANVAS_SIZE}×{settings.CANVAS_SIZE}px, nearest-neighbor")

    if settings.GEMINI_API_KEY:
        st.success("API key loaded ✓", icon="🟢")
    else:
        st.warning("GEMINI_API_KEY not set", icon="⚪")

    st.divider()

    st.markdown("### 📋 Style Rules Applied")
    if sprite_session:
        rules = sprite_session.style_rules()
    else:
        rules = [
            f"Resolution: {settings.DEFAULT_RESOLUTION} Strict",
            f"Palette: Max {settings.DEFAULT_MAX_COLORS} Flat Colors",
            "Background: Solid",
            "No Shading, No Gradients",
        ]
    for rule in rules:
        st.markdown(f'<div class="rule-item">{rule}</div>', unsafe_allow_html=True)


# ── Main Content — Two Panels ────────────────────────────────────────

panel_a, panel_b = st.columns([1, 1])

# ── Panel A: Sprite Config ───────────────────────────────────────────
with panel_a:
    st.markdown('<div class="panel-title">🕹️ Sprite Config</div>', unsafe_allow_html=True)

    subject = st.text_input(
        "Character / Object",
        key="subject",
        placeholder="e.g. A grumpy wizard cat",
        disabled=is_loading,
    )
    st.checkbox(
        "Include thematic props", value=False, key="include_props", disabled=is_loading,
    )

    with st.expander("Customize Background & Style"):
        col1, col2 = st.columns(2)
        with col1:
            st.selectbox(
                "Resolution",
                list(Resolution),
                key="resolution",
                index=list(Resolution).index(Resolution(settings.DEFAULT_RESOLUTION)),
                format_func=lambda r: RESOLUTION_LABELS[r],
                disabled=is_loading,
            )
        with col2:
            st.slider(
                "Max Colors",
                key="max_colors",
                min_value=MIN_COLORS,
                max_value=MAX_COLORS,
                value=settings.DEFAULT_MAX_COLORS,
                disabled=is_loading,
            )

        background_type = st.radio(
            "Background Style",
            list(BackgroundType),
            key="background_type",
            format_func=lambda b: BACKGROUND_LABELS[b],
            horizontal=True,
            disabled=is_loading,
        )

        if background_type == BackgroundType.BANDS:
            col3, col4 = st.columns(2)
            with col3:
                st.radio(
                    "Orientation",
                    list(BandOrientation),
                    key="band_orientation",
                    format_func=lambda o: o.value.capitalize(),
                    disabled=is_loading,
                )
            with col4:
                st.slider(
                    "Band Count",
                    key="band_count",
                    min_value=MIN_BANDS,
                    max_value=MAX_BANDS,
                    value=settings.DEFAULT_BAND_COUNT,
                    disabled=is_loading,
                )

    st.button(
        "✨ Generate Sprite",
        type="primary",
        width="stretch",
        disabled=is_loading or not subject.strip(),
        on_click=request_generate,
    )

    if state and state.error:
        st.error(f"⚠️ {state.error}")

# ── Panel B: Preview Canvas ──────────────────────────────────────────
with panel_b:
    st.markdown('<div class="panel-title">🖼️ Preview Canvas</div>', unsafe_allow_html=True)

    if sprite_session and sprite_session.canvas.has_image:
        canvas = sprite_session.canvas
        st.image(canvas.image, width="stretch")

        st.caption(f"**Output:** {canvas.size} x {canvas.size} PNG")

        col_dl, col_clear = st.columns(2)
        with col_dl:
            st.download_button(
                "📥 Download Sprite",
                data=canvas.export_png(),
                file_name=canvas.filename,
                mime="image/png",
                type="primary",
                width="stretch",
            )
        with col_clear:
            clear_btn = st.button("🗑️ Discard", width="stretch", disabled=is_loading)
            if clear_btn:
                sprite_session.clear()
                st.rerun()

        if sprite_session.last_options:
            from canvas.palette import summarize_palette

            summary = summarize_palette(canvas.image, sprite_session.last_options.max_colors)
            verdict = "within" if summary.within_limit else "over"
            st.caption(
                f"**Palette:** {summary.color_count} colors found "
                f"({verdict} the limit of {summary.max_colors})"
            )
            swatches = "".join(
                f'<span style="display:inline-block;width:18px;height:18px;'
                f'margin-right:4px;border-radius:3px;background:{c};"></span>'
                for c in summary.top_colors
            )
            st.markdown(swatches, unsafe_allow_html=True)
    else:
        # Placeholder
        placeholder_html = """
        <div style="
            width: 100%; aspect-ratio: 1;
            background: #1e293b;
            border: 2px dashed #334155;
            border-radius: 12px;
            display: flex; flex-direction: column;
            align-items: center; justify-content: center;
            color: #64748b; font-size: 0.9rem;
        ">
            <span style="font-family: 'Press Start 2P', monospace; font-size: 0.7rem;">NO SPRITE GENERATED</span>
            <span style="margin-top: 0.5rem;">Enter a prompt to create a new character</span>
        </div>
        """
        st.markdown(placeholder_html, unsafe_allow_html=True)


# ── Button Logic (after layout) ──────────────────────────────────────

if st.session_state.generating:
    with st.spinner("Rendering pixels..."):
        run_pending(st.session_state, get_sprite_session)
    st.rerun()

# Show errors that never reached the session (bad options, missing key)
if st.session_state.error_message:
    st.error(f"⚠️ {st.session_state.error_message}")
    st.session_state.error_message = None
