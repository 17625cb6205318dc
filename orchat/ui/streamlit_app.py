from __future__ import annotations

import time

import streamlit as st

from orchat.config import load_settings
from orchat.errors import ChatError, ConfigError
from orchat.llm import build_transport
from orchat.session import ConversationSession
from orchat.utils.run_log import (
    RunLogPaths,
    append_event,
    init_run_log,
    log_error,
    log_turn,
    make_run_id,
    recent_events,
)

st.set_page_config(page_title="orchat", layout="centered")
st.title("orchat")

try:
    settings = load_settings()
except ConfigError as e:
    st.error(f"Configuration error: {e}")
    st.info("Set OPENROUTER_API_KEY (or ORCHAT_BACKEND=mock) in the environment or a local `.env`, then reload.")
    st.stop()


def new_session() -> ConversationSession:
    old = st.session_state.get("transport")
    if old is not None:
        old.close()
    transport = build_transport(settings)
    session = ConversationSession.from_settings(settings, transport)
    log = init_run_log(settings.log_dir, make_run_id())
    append_event(
        log,
        "start",
        session=session,
        extra={"model": settings.model, "url": settings.api_url, "backend": settings.backend, "ui": "streamlit"},
    )
    st.session_state["transport"] = transport
    st.session_state["session"] = session
    st.session_state["log"] = log
    return session


session: ConversationSession = st.session_state.get("session") or new_session()
log: RunLogPaths = st.session_state["log"]

for m in session.history:
    if m.role == "system":
        st.caption(f"system: {m.content}")
        continue
    with st.chat_message(m.role):
        st.markdown(m.content)

prompt = st.chat_input("Type your message")
if prompt and prompt.strip():
    with st.chat_message("user"):
        st.markdown(prompt)
    with st.chat_message("assistant"):
        with st.spinner("Waiting for the model..."):
            started = time.perf_counter()
            try:
                reply = session.submit(prompt.strip())
            except ChatError as e:
                log_error(log, session, e)
                st.error(f"{e.kind}: {e}")
            else:
                log_turn(log, session, reply, round((time.perf_counter() - started) * 1000))
                st.markdown(reply)

# Drawn after the turn so the counters include it.
st.sidebar.metric("turns", session.turns)
st.sidebar.caption(f"model: `{settings.model}`")
st.sidebar.caption(f"endpoint: `{settings.api_url}`")
st.sidebar.caption(f"backend: `{settings.backend}`")
if st.sidebar.button("New conversation"):
    new_session()
    st.rerun()

with st.sidebar.expander("Run log"):
    st.caption(f"`{log.jsonl_path}`")
    rows = [
        {k: e.get(k) for k in ("ts", "event", "turns", "history_len", "kind", "status_code", "elapsed_ms")}
        for e in recent_events(log.jsonl_path)
    ]
    st.dataframe(rows, use_container_width=True)
