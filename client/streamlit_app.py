"""Simple client-side Streamlit UI for the Gemini chat gateway.

Features
--------
* Chat interface powered by the `st.chat_message` elements.
* Sidebar to configure the **API base URL** of the gateway.
* Every prompt is sent on its own: the gateway keeps no history, the
  transcript below only lives in `st.session_state` for display.

Run with:
    $ streamlit run client/streamlit_app.py

Make sure the gateway is up (default assumes http://localhost:5000/api/chat)
or change the "API Base URL" in the sidebar.
"""

from __future__ import annotations

from typing import Dict, List

import requests
import streamlit as st

###############################################################################
# Session-state helpers
###############################################################################

if "messages" not in st.session_state:
    # Each message is a {"role": "user"|"assistant", "content": str}
    st.session_state.messages: List[Dict[str, str]] = []

###############################################################################
# Sidebar - configuration
###############################################################################

st.sidebar.header("Server configuration")
API_BASE_URL: str = st.sidebar.text_input(
    "API Base URL", value="http://localhost:5000", help="Where the gateway lives"
)
TIMEOUT_SEC: int = st.sidebar.number_input("Request timeout (s)", value=60, step=5, min_value=5)

if st.sidebar.button("Clear transcript"):
    st.session_state.messages = []
    st.rerun()

###############################################################################
# Page setup
###############################################################################

st.set_page_config(page_title="Gemini Chat", page_icon="🤖", layout="wide")
st.title("Gemini Chat")


def ask_gateway(prompt: str) -> str:
    """POST one prompt and return the reply, or the gateway's error text."""
    try:
        r = requests.post(
            f"{API_BASE_URL.rstrip('/')}/api/chat",
            json={"message": prompt},
            timeout=TIMEOUT_SEC,
        )
    except requests.RequestException as exc:
        return f"⚠️ Error talking to backend: {exc}"

    try:
        data = r.json()
    except ValueError:
        return f"⚠️ Backend returned {r.status_code} with a non-JSON body"

    if r.ok:
        return data.get("response", "(no 'response' field in response)")
    return f"⚠️ {data.get('error', f'HTTP {r.status_code}')}"


###############################################################################
# Display chat history
###############################################################################

for msg in st.session_state.messages:
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])

###############################################################################
# Chat input
###############################################################################

user_prompt = st.chat_input("Ask something…")
if user_prompt:
    st.session_state.messages.append({"role": "user", "content": user_prompt})
    assistant_reply = ask_gateway(user_prompt)
    st.session_state.messages.append({"role": "assistant", "content": assistant_reply})
    st.rerun()
