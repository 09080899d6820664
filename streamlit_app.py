import streamlit as st

from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import initialize_logging, get_logger
from infrastructure.storage import StorageError
from services.ui_service import get_auth_interface, get_marketplace_interface

# Initialize logging and error tracking
error_tracker = initialize_logging()
logger = get_logger(__name__)

# Get configuration
config = get_config()

st.set_page_config(page_title=config.ui.app_title, page_icon=config.ui.page_icon, layout="wide")

auth = get_auth_interface()
marketplace = get_marketplace_interface()


def run_page(render, context: str):
    """Render a page, turning storage failures into a visible error"""
    try:
        render()
    except StorageError as e:
        error_tracker.track_error(e, context, key=e.key)
        st.error("🔧 **Storage error** - Your last change could not be saved. Please try again.")


def browse_page():
    run_page(lambda: marketplace.render_browse_page(auth.get_session_user()), "browse_page")


def verify_email_page():
    st.header("📧 Email Verification")
    run_page(auth.handle_verification_link, "verify_email_page")


def signed_in(render_with_user, context: str):
    """Page that needs a session user; falls back to the sign-in form"""
    def page():
        session_user = auth.get_session_user()
        if session_user is None:
            run_page(auth.render_auth_page, "auth_page")
            return
        auth.render_verification_banner(session_user)
        run_page(lambda: render_with_user(session_user), context)
    return page


def render_sidebar():
    session_user = auth.get_session_user()
    with st.sidebar:
        st.markdown(f"## {config.ui.page_icon} {config.ui.app_title}")
        if session_user:
            st.write(f"Signed in as **{session_user.display_name}**")
        st.caption(f"🛒 {marketplace.catalog.cart_count()} item(s) in cart")


pages = [
    st.Page(browse_page, title="Browse", icon="🛍️", url_path="browse", default=True),
    st.Page(signed_in(marketplace.render_sell_page, "sell_page"), title="Sell", icon="➕", url_path="sell"),
    st.Page(signed_in(marketplace.render_my_listings_page, "my_listings_page"), title="My Listings", icon="📦", url_path="my-listings"),
    st.Page(signed_in(marketplace.render_cart_page, "cart_page"), title="Cart", icon="🛒", url_path="cart"),
    st.Page(signed_in(marketplace.render_purchases_page, "purchases_page"), title="Purchases", icon="🧾", url_path="purchases"),
    st.Page(signed_in(auth.render_profile_page, "profile_page"), title="Profile", icon="👤", url_path="profile"),
    st.Page(verify_email_page, title="Verify Email", icon="📧", url_path="verify-email"),
]

if config.ui.show_dev_inbox:
    pages.append(st.Page(auth.render_dev_inbox, title="Dev Inbox", icon="📬", url_path="dev-inbox"))

render_sidebar()
navigation = st.navigation(pages)
logger.debug(f"Rendering page: {navigation.title}")
navigation.run()
