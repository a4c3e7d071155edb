"""Streamlit console to review, approve, and reject pending KYC applications."""
import asyncio
import threading
from pathlib import Path
from typing import Any, Callable, Coroutine

import streamlit as st

# Allow running via "streamlit run kyc_review/ui/dashboard.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from kyc_review.core.config import load_settings
from kyc_review.core.logging import configure_logging
from kyc_review.core.models import KYCRecord, ReviewSnapshot
from kyc_review.review.controller import ReviewSessionController
from kyc_review.review.workflow import record_details, records_to_rows, status_label


class _LoopRunner:
    """Event loop on a daemon thread that owns the review controller.

    Streamlit reruns the script on its own thread; every controller call is
    submitted to this loop so workflow state is only touched in one place and
    notification timers keep firing between reruns.
    """

    def __init__(self) -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self.loop.run_forever, name="kyc-review-loop", daemon=True)
        self._thread.start()

    def run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result()

    def call(self, func: Callable[..., Any], *args: Any) -> Any:
        async def _invoke() -> Any:
            return func(*args)

        return self.run(_invoke())


def _session_controller() -> tuple[_LoopRunner, ReviewSessionController]:
    """Create the loop and controller once per browser session."""

    if "review_runner" not in st.session_state:
        runner = _LoopRunner()
        settings = load_settings()
        st.session_state.review_runner = runner
        st.session_state.review_controller = runner.call(
            ReviewSessionController.from_settings, settings, runner.loop
        )
    return st.session_state.review_runner, st.session_state.review_controller


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _render_notifications(snapshot: ReviewSnapshot) -> None:
    renderer = {"success": st.success, "error": st.error, "info": st.info}
    for notification in snapshot.notifications:
        renderer.get(notification.kind, st.info)(notification.message)


def _render_login(runner: _LoopRunner, controller: ReviewSessionController, snapshot: ReviewSnapshot) -> None:
    st.title("KYC Admin Panel")
    st.caption("Sign in to manage KYC approvals")
    with st.form("login_form"):
        username = st.text_input("Username", placeholder="Enter admin username")
        password = st.text_input("Password", type="password", placeholder="Enter admin password")
        submitted = st.form_submit_button("Sign In", disabled=snapshot.loading, type="primary")
    if submitted:
        if not username or not password:
            st.warning("Enter both username and password.")
            return
        with st.spinner("Signing in..."):
            runner.run(controller.login(username, password))
        _rerun_app()


def _render_details(runner: _LoopRunner, controller: ReviewSessionController, snapshot: ReviewSnapshot) -> None:
    record: KYCRecord = snapshot.selected_record
    busy = snapshot.processing_id == record.id

    st.subheader(f"KYC Application Details  ·  ID {record.id}")
    st.caption(f"Status: {status_label(record.status)}")
    st.table([{"Field": label, "Value": value} for label, value in record_details(record)])

    if record.has_documents:
        st.markdown("#### Documents")
        columns = st.columns(2)
        for column, (label, url) in zip(columns, [("ID Front", record.id_front_image), ("Selfie", record.selfie_image)]):
            with column:
                if url:
                    st.image(url, caption=label)
                    st.markdown(f"[Open {label} in new tab]({url})")
                else:
                    st.caption(f"No {label.lower()} uploaded")

    if snapshot.reject_prompt_open:
        st.markdown("#### Reject KYC Application")
        st.write(f"You are about to reject the KYC application for **{record.customer_email}**.")
        reason = st.text_area(
            "Reason for rejection (optional)",
            value=snapshot.reject_reason,
            key=f"reject_reason_{record.id}",
        )
        cancel_col, confirm_col = st.columns(2)
        if cancel_col.button("Cancel", key="reject_cancel"):
            runner.call(controller.close_reject_prompt)
            _rerun_app()
        if confirm_col.button("Reject KYC", type="primary", disabled=busy, key="reject_confirm"):
            runner.call(controller.set_reject_reason, reason)
            with st.spinner("Rejecting..."):
                runner.run(controller.reject(record.id))
            _rerun_app()
        return

    close_col, reject_col, approve_col = st.columns(3)
    if close_col.button("Close", key="details_close"):
        runner.call(controller.close_details)
        _rerun_app()
    if reject_col.button("Reject", disabled=busy, key="details_reject"):
        runner.call(controller.open_reject_prompt)
        _rerun_app()
    if approve_col.button("Approve", type="primary", disabled=busy, key="details_approve"):
        with st.spinner("Approving..."):
            runner.run(controller.approve(record.id))
        _rerun_app()


def _render_queue(runner: _LoopRunner, controller: ReviewSessionController, snapshot: ReviewSnapshot) -> None:
    header_col, refresh_col = st.columns([4, 1])
    with header_col:
        st.subheader("Pending KYC Applications")
        st.caption(f"{len(snapshot.records)} applications awaiting review")
    with refresh_col:
        if st.button("Refresh", disabled=snapshot.loading):
            with st.spinner("Loading..."):
                runner.run(controller.refresh())
            _rerun_app()

    if not snapshot.records:
        st.info("No pending KYC applications. All applications have been processed.")
        return

    st.dataframe(records_to_rows(snapshot.records), use_container_width=True, hide_index=True)

    for record in snapshot.records:
        busy = snapshot.processing_id == record.id
        label_col, view_col, approve_col, reject_col = st.columns([4, 1, 1, 1])
        label_col.write(f"#{record.id} · {record.full_name or record.customer_email}")
        if view_col.button("View", key=f"view_{record.id}"):
            runner.call(controller.open_details, record)
            _rerun_app()
        if approve_col.button("Approve", key=f"approve_{record.id}", disabled=busy):
            runner.run(controller.approve(record.id))
            _rerun_app()
        if reject_col.button("Reject", key=f"reject_{record.id}", disabled=busy):
            runner.call(controller.open_reject_prompt, record)
            _rerun_app()


def main() -> None:
    """Render the review console."""

    configure_logging()
    st.set_page_config(page_title="KYC Admin Panel", layout="wide")
    runner, controller = _session_controller()
    snapshot: ReviewSnapshot = runner.call(controller.snapshot)

    with st.sidebar:
        st.subheader("Notifications")
        _render_notifications(snapshot)

    if not snapshot.authenticated:
        _render_login(runner, controller, snapshot)
        return

    title_col, user_col = st.columns([4, 1])
    title_col.title("KYC Admin Dashboard")
    with user_col:
        st.write(f"Welcome, **{snapshot.username}**")
        if st.button("Logout"):
            runner.call(controller.logout)
            _rerun_app()

    if snapshot.selected_record is not None:
        _render_details(runner, controller, snapshot)
        st.divider()
    _render_queue(runner, controller, snapshot)


if __name__ == "__main__":
    main()
