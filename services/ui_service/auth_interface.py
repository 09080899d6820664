"""
Authentication interface - sign-in, registration, email verification and profile pages.
"""

import streamlit as st
from typing import Optional

from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import get_logger
from services.auth_service import (
    CredentialService,
    SessionUser,
    get_credential_service,
    validate_login,
    validate_registration
)


class AuthInterface:
    """
    Streamlit pages in front of the credential service
    """

    def __init__(self, credential_service: CredentialService = None):
        self.logger = get_logger(__name__)
        self.config = get_config()
        self.credentials = credential_service or get_credential_service()

    def get_session_user(self) -> Optional[SessionUser]:
        return self.credentials.get_session_user()

    def handle_verification_link(self) -> None:
        """Consume ``?token=...`` when the app is opened from a verification link"""
        token = st.query_params.get("token")
        if not token:
            return

        if self.credentials.verify_email(token):
            st.success("✅ Email verified! Your account is now fully active.")
        else:
            st.error("❌ This verification link is invalid or has expired.")

        del st.query_params["token"]

    def render_auth_page(self):
        """Render login/registration tabs"""
        st.title(f"{self.config.ui.page_icon} {self.config.ui.app_title}")
        st.caption(self.config.ui.tagline)

        login_tab, register_tab = st.tabs(["🔑 Sign In", "📝 Create Account"])

        with login_tab:
            self._render_login_tab()

        with register_tab:
            self._render_register_tab()

    def _render_login_tab(self):
        with st.form("login_form"):
            email = st.text_input("📧 Email", placeholder="your@email.com")
            password = st.text_input("🔒 Password", type="password")
            submitted = st.form_submit_button("🔑 Sign In", type="primary", use_container_width=True)

        if not submitted:
            return

        errors = validate_login(email, password)
        if errors:
            for message in errors.values():
                st.error(message)
            return

        if self.credentials.login(email, password):
            st.success("Welcome back!")
            st.rerun()
        else:
            st.error("❌ Invalid email or password")

    def _render_register_tab(self):
        with st.form("register_form"):
            display_name = st.text_input("👤 Display Name", placeholder="How buyers will see you")
            email = st.text_input("📧 Email", placeholder="your@email.com", key="register_email")
            password = st.text_input("🔒 Password", type="password", key="register_password",
                                     help="8+ characters with upper and lower case, a number and one of @$!%*?&")
            confirm_password = st.text_input("🔒 Confirm Password", type="password")
            submitted = st.form_submit_button("📝 Create Account", type="primary", use_container_width=True)

        if not submitted:
            return

        errors = validate_registration(email, password, display_name, confirm_password)
        if errors:
            for message in errors.values():
                st.error(message)
            return

        if self.credentials.register(email, password, display_name):
            st.success("✅ Account created! Check your inbox to verify your email.")
            st.rerun()
        else:
            st.error("❌ An account with this email already exists")

    def render_verification_banner(self, session_user: SessionUser):
        """Nag unverified users and let them resend the link"""
        if session_user.email_verified:
            return

        col1, col2 = st.columns([4, 1])
        with col1:
            st.warning(f"📧 Please verify your email address ({session_user.email}).")
        with col2:
            if st.button("Resend", key="resend_verification"):
                if self.credentials.resend_verification_email(session_user):
                    st.toast("Verification email sent")
                else:
                    st.toast("Could not send verification email")

    def render_profile_page(self, session_user: SessionUser):
        st.header("👤 Profile")
        st.caption(f"@{session_user.username} · member since {session_user.created_at:%B %Y}")

        status = "✅ Verified" if session_user.email_verified else "⏳ Not verified"
        st.write(f"**Email:** {session_user.email} ({status})")

        with st.form("profile_form"):
            display_name = st.text_input("Display Name", value=session_user.display_name)
            name = st.text_input("Full Name", value=session_user.name)
            phone = st.text_input("Phone", value=session_user.phone)
            address = st.text_area("Address", value=session_user.address)
            saved = st.form_submit_button("💾 Save Changes", type="primary")

        if saved:
            updated = self.credentials.update_profile(session_user, {
                "display_name": display_name,
                "name": name,
                "phone": phone,
                "address": address
            })
            if updated:
                st.success("Profile updated")
                st.rerun()
            else:
                st.error("Display name must be at least 2 characters long")

        st.divider()
        if st.button("🚪 Sign Out"):
            self.credentials.logout()
            st.rerun()

        if self.config.debug:
            with st.expander("⚠️ Danger zone"):
                if st.button("Delete all accounts", type="secondary"):
                    self.credentials.clear_all_data()
                    st.rerun()

    def render_dev_inbox(self):
        """Show simulated verification emails so their links can be followed"""
        st.header("📬 Developer Inbox")
        st.caption("Emails are simulated; nothing leaves this machine.")

        outbox = getattr(self.credentials.sender, "outbox", [])
        if not outbox:
            st.info("No emails sent yet.")
            return

        for message in reversed(outbox):
            with st.container(border=True):
                st.write(f"**To:** {message.recipient}  \n**Subject:** {message.subject}")
                st.caption(f"{message.sent_at:%d %b %Y %H:%M:%S}")
                st.markdown(f"[Verify email]({message.link})")


# Global auth interface instance
_auth_interface: Optional[AuthInterface] = None


def get_auth_interface() -> AuthInterface:
    """Get the global auth interface instance"""
    global _auth_interface
    if _auth_interface is None:
        _auth_interface = AuthInterface()
    return _auth_interface
