import streamlit as st

from flashdeck.runner import run_app

st.set_page_config(page_title="G検定単語帳", page_icon="📘", layout="centered")

run_app()
