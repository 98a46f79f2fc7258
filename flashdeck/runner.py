from __future__ import annotations
import html
import logging
import random
from typing import Optional, Tuple

import streamlit as st

from flashdeck.cards import Card, CardDataError, load_cards
from flashdeck.config import Settings, configure_logging, load_settings
from flashdeck.presenter import CardPresenter
from flashdeck.session import DisplayState, SessionController, Verdict
from flashdeck.storage import JsonFileStore

logger = logging.getLogger(__name__)

NOTHING_TO_REVIEW = "間違えた問題はありません。素晴らしい！"

# ---------- Styles ----------
CARD_CSS = """
<style>
:root { --card-bg:#ffffff; --card-fg:#1f2937; --muted:#6b7280; --accent:#4f46e5; }
.fd-card {
  background: var(--card-bg);
  color: var(--card-fg);
  border-radius: 18px;
  box-shadow: 0 20px 50px rgba(0,0,0,.12);
  margin: .9rem auto .6rem;
  padding: clamp(24px, 4vw, 48px);
}
.fd-card .question {
  font-size: clamp(18px, 1.8vw, 26px);
  line-height: 1.5;
  font-weight: 700;
  min-height: 96px;
}
.fd-card .answer {
  margin-top: 1.2rem;
  padding-top: 1.2rem;
  border-top: 1px solid #e5e7eb;
  text-align: center;
  font-size: clamp(22px, 2.4vw, 34px);
  letter-spacing: .08em;
  color: var(--accent);
}
.fd-message { text-align:center; padding: 2.5rem 1rem; }
.fd-message h2 { margin-bottom: .4rem; }
.fd-progress { text-align:center; color: var(--muted); font-size: .9rem; }
</style>
"""


# ---------- Data loading ----------
@st.cache_data(show_spinner=False)
def cached_cards(path: Optional[str]) -> Tuple[Card, ...]:
    return load_cards(path)


def get_controller(settings: Settings) -> SessionController:
    """One controller per browser session, kept in st.session_state."""
    ss = st.session_state
    if "fd_controller" not in ss:
        try:
            cards = cached_cards(str(settings.cards_path) if settings.cards_path else None)
        except CardDataError as e:
            logger.error("Card data could not be loaded: %s", e)
            st.error(f"Card data could not be loaded: {e}")
            st.stop()
        controller = SessionController(
            JsonFileStore(settings.storage_path),
            storage_key=settings.storage_key,
            rng=random.Random(settings.seed),
        )
        controller.initialize(cards)
        ss.fd_controller = controller
        ss.fd_presenter = None
    return ss.fd_controller


def get_presenter(controller: SessionController, card: Card) -> CardPresenter:
    """Fresh presenter for a new card, or once the previous one took its verdict."""
    ss = st.session_state
    presenter = ss.get("fd_presenter")
    if presenter is None or presenter.finished or presenter.card.id != card.id:
        presenter = CardPresenter(card, controller.record_verdict)
        ss.fd_presenter = presenter
    return presenter


# ---------- Event handlers ----------
def _on_review_toggle() -> None:
    ss = st.session_state
    controller: SessionController = ss.fd_controller
    if not controller.toggle_review_mode():
        ss.fd_notice = NOTHING_TO_REVIEW
    ss.fd_presenter = None
    ss.review_toggle = controller.review_mode


def _on_reveal_one() -> None:
    st.session_state.fd_presenter.reveal_one()


def _on_flip() -> None:
    st.session_state.fd_presenter.reveal_all()


def _on_verdict(verdict: Verdict) -> None:
    st.session_state.fd_presenter.submit(verdict)


def _on_restart() -> None:
    st.session_state.fd_controller.restart()
    st.session_state.fd_presenter = None


# ---------- Rendering ----------
def render_header(controller: SessionController) -> None:
    left, right = st.columns([3, 2])
    with left:
        st.markdown("## 📘 G検定単語帳")
    with right:
        st.session_state.setdefault("review_toggle", controller.review_mode)
        st.toggle("復習モード", key="review_toggle", on_change=_on_review_toggle)
        st.caption(f"間違えた問題: {controller.incorrect_count}")


def render_card(presenter: CardPresenter) -> None:
    card = presenter.card
    st.markdown(
        f"""
        <div class="fd-card">
          <div class="question">{html.escape(card.question)}</div>
          <div class="answer">{html.escape(presenter.display_text)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )
    left, right = st.columns(2)
    if not presenter.fully_revealed:
        left.button(
            "1文字めくる",
            key="fd_reveal_one",
            on_click=_on_reveal_one,
            disabled=not presenter.can_reveal_more,
        )
        right.button("めくる", key="fd_flip", on_click=_on_flip)
    else:
        left.button("✕ 間違えた", key="fd_incorrect", on_click=_on_verdict, args=(Verdict.INCORRECT,))
        right.button("✓ 正解した", key="fd_correct", on_click=_on_verdict, args=(Verdict.CORRECT,))


def render_message(icon: str, title: str, body: str) -> None:
    st.markdown(
        f'<div class="fd-message"><div style="font-size:3rem">{icon}</div>'
        f"<h2>{title}</h2><p>{body}</p></div>",
        unsafe_allow_html=True,
    )


def render_content(controller: SessionController) -> None:
    state = controller.display_state()
    if state == DisplayState.REVIEW_COMPLETE:
        render_message("✅", "復習完了!", "間違えた問題は全てクリアしました。お疲れ様でした!")
    elif state == DisplayState.LOADING:
        st.caption("Loading cards...")
    elif state == DisplayState.DECK_COMPLETE:
        render_message("✨", "デッキ完了!", "全てのカード学習お疲れ様でした!")
        st.button("もう一度", key="fd_restart", on_click=_on_restart)
    else:
        card = controller.current_card()
        if card is None:
            logger.warning("No card for deck position %d", controller.position)
            return
        render_card(get_presenter(controller, card))


def render_footer(controller: SessionController) -> None:
    progress = controller.progress()
    if progress:
        st.markdown(f'<div class="fd-progress">{progress[0]} / {progress[1]}</div>', unsafe_allow_html=True)


def run_app(settings: Optional[Settings] = None) -> None:
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)
    st.markdown(CARD_CSS, unsafe_allow_html=True)

    controller = get_controller(settings)
    render_header(controller)

    notice = st.session_state.pop("fd_notice", None)
    if notice:
        st.info(notice)

    render_content(controller)
    render_footer(controller)
