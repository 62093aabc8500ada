"""
Streamlit entrypoint for StokPro.
- Staff sign in on the main screen with APP_PASSWORD -> admin role
- Owner signs in from the sidebar with OWNER_PASSWORD -> every page
- Admin pages follow the permission flags the owner sets
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Add project root to Python path FIRST
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import streamlit as st

from inventory.ui import page_router, pages_for
from services import config_manager
from services.utils.secrets import get_secret

logging.basicConfig(
    level=(get_secret("STOKPRO_LOG_LEVEL") or "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("stokpro")

st.set_page_config(page_title="StokPro", page_icon="📦", layout="wide")

APP_PASSWORD = get_secret("APP_PASSWORD")
OWNER_PASSWORD = get_secret("OWNER_PASSWORD")

st.session_state.setdefault("role", None)
st.session_state.setdefault("user_name", None)


def _sign_in(role: str, name: str) -> None:
    st.session_state.role = role
    st.session_state.user_name = name
    logger.info("%s signed in", role)


def _sign_out() -> None:
    logger.info("%s signed out", st.session_state.role)
    st.session_state.role = None
    st.session_state.user_name = None
    st.rerun()


# -----------------------------------------------------------------------------
# Sidebar: owner login
# -----------------------------------------------------------------------------
def owner_login() -> None:
    st.sidebar.markdown("### Owner Login")
    if st.session_state.role == "owner":
        st.sidebar.success("🟢 Logged in as Owner")
        if st.sidebar.button("Logout Owner", use_container_width=True, key="owner_logout_btn"):
            _sign_out()
        return

    owner_pw = st.sidebar.text_input("Password", type="password", placeholder="••••••••", key="owner_pw")
    if st.sidebar.button("Login", use_container_width=True, key="owner_login_btn"):
        if OWNER_PASSWORD and owner_pw == str(OWNER_PASSWORD):
            _sign_in("owner", "Owner")
            st.rerun()
        st.sidebar.error("❌ Wrong password")


# -----------------------------------------------------------------------------
# Main screen: staff gate
# -----------------------------------------------------------------------------
def staff_gate() -> bool:
    if st.session_state.role:
        return True
    if not APP_PASSWORD:
        # No staff password configured: open access as admin
        _sign_in("admin", "Admin")
        return True

    st.title("🔐 StokPro Sign in")
    pw = st.text_input("Password", type="password", placeholder="Enter password…", key="user_pw_box")
    if st.button("Sign in", key="user_signin_btn"):
        if pw == str(APP_PASSWORD):
            _sign_in("admin", "Admin")
            st.rerun()
        st.error("Incorrect password.")
    return False


owner_login()
if not staff_gate():
    st.stop()

hdr_c, hdr_r = st.columns([6, 1])
with hdr_c:
    st.title("📦 StokPro")
with hdr_r:
    if st.session_state.role == "admin" and APP_PASSWORD and st.button("Logout"):
        _sign_out()

# Loaded on every run: stock must reflect the latest saved movements
catalog = config_manager.load_catalog()
if config_manager.get_last_warning():
    st.warning(config_manager.get_last_warning())

pages = pages_for(st.session_state.role, catalog)
if not pages:
    st.error("Your account has no pages enabled. Ask the owner to grant access.")
    st.stop()

choice = st.sidebar.radio("Menu", options=pages, index=0, key="page_choice")
st.sidebar.caption(
    f"Data ({config_manager.storage_source()}): {config_manager.get_catalog_path()} "
    f"· saved {config_manager.catalog_mtime()}"
)

if st.button("🔄 Refresh"):
    st.rerun()
st.markdown("---")

try:
    page_router(choice, catalog, st.session_state.user_name)
except Exception as e:
    logger.exception("page %s failed", choice)
    st.error(f"The {choice} page failed to render.")
    st.exception(e)
