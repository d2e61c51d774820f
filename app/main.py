"""
Streamlit Frontend for Receipt Log

One page:
- Title shows the running total
- "Add Receipt" opens the amount prompt (amount, optional photo, submit/cancel)
- Each saved receipt expands to its details, photo and a delete button

The page holds no entry state of its own. The EntryWorkflow kept in the
session owns the pending record, the typed amount and the captured photo.
"""

import asyncio

import streamlit as st

from receiptlog.audit import AuditLogger
from receiptlog.config import AppSettings, get_settings, validate_all_settings
from receiptlog.display import (
    AMOUNT_PLACEHOLDER,
    AMOUNT_PROMPT_MESSAGE,
    AMOUNT_PROMPT_TITLE,
    NO_IMAGE_PLACEHOLDER,
    record_label,
    record_summary,
    total_title,
)
from receiptlog.orchestrator import (
    EntryState,
    EntryWorkflow,
    ReceiptListFlow,
    create_app_components,
    create_entry_workflow,
)
from receiptlog.services.storage import PersistenceError, RecordStoreInterface, StorageError


st.set_page_config(
    page_title="Receipts",
    page_icon="🧾",
    layout="centered",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create the shared application components (cached)."""
    return create_app_components()


def get_workflow(store: RecordStoreInterface, audit_logger: AuditLogger) -> EntryWorkflow:
    """One entry workflow per browser session."""
    if "entry_workflow" not in st.session_state:
        st.session_state.entry_workflow = create_entry_workflow(store, audit_logger)
        st.session_state.capture_count = 0
    return st.session_state.entry_workflow


def main():
    """Main application entry point."""
    if not render_settings_status():
        st.error("Fix the configuration shown in the sidebar, then reload the page.")
        st.stop()

    store, list_flow, audit_logger = get_components()
    workflow = get_workflow(store, audit_logger)
    settings = get_settings().app

    try:
        total = run_async(list_flow.total())
    except StorageError as e:
        st.error(f"Could not read saved receipts: {e}")
        st.stop()

    st.title(total_title(total, settings))

    if workflow.state == EntryState.IDLE:
        if st.button("➕ Add Receipt", type="primary"):
            workflow.start()
            st.rerun()
    else:
        render_entry_prompt(workflow)

    st.markdown("---")
    render_receipt_list(list_flow, settings)


def render_settings_status() -> bool:
    """Render the configuration status in the sidebar; True if every group loads."""
    status = validate_all_settings()

    groups = [
        ("Storage", "store"),
        ("Receipt photos", "image"),
        ("Application", "app"),
    ]

    with st.sidebar:
        st.markdown("### Configuration")
        for name, key in groups:
            if status.get(key, False):
                st.success(f"✅ {name}")
            else:
                error = status.get(f"{key}_error", "Invalid configuration")
                st.error(f"❌ {name} - {error}")

    return all(status.get(key, False) for _, key in groups)


def render_entry_prompt(workflow: EntryWorkflow):
    """Render the amount prompt for the entry in progress."""
    draft = workflow.draft

    st.subheader(AMOUNT_PROMPT_TITLE)
    st.caption(AMOUNT_PROMPT_MESSAGE)

    amount_text = st.text_input(
        "Amount",
        value=draft.amount_text,
        placeholder=AMOUNT_PLACEHOLDER,
        key=f"amount_{draft.record.id}",
    )
    workflow.set_amount_text(amount_text)

    if draft.state == EntryState.CAPTURING_PHOTO:
        render_camera(workflow)
        return

    if draft.has_photo:
        st.caption("📷 Photo attached")

    col1, col2, col3 = st.columns(3)

    with col1:
        if st.button("📷 Take Photo"):
            workflow.begin_photo_capture()
            st.session_state.capture_count += 1
            st.rerun()

    with col2:
        if st.button("✅ Submit", type="primary"):
            try:
                record = run_async(workflow.submit())
            except PersistenceError as e:
                st.error(f"Could not save the receipt: {e}. Please try again.")
                return
            # An unreadable amount leaves the prompt open as it is
            if record is not None:
                st.rerun()

    with col3:
        if st.button("Cancel"):
            workflow.cancel()
            st.rerun()


def render_camera(workflow: EntryWorkflow):
    """Render the camera while a photo is being captured."""
    photo = st.camera_input(
        "Take a photo of the receipt",
        key=f"camera_{st.session_state.capture_count}",
    )

    if photo is not None:
        try:
            run_async(workflow.complete_photo_capture(photo.getvalue()))
        except PersistenceError as e:
            st.error(f"Could not save the receipt: {e}. Please try again.")
            return
        st.rerun()

    if st.button("Close Camera"):
        workflow.dismiss_photo_capture()
        st.rerun()


def render_receipt_list(list_flow: ReceiptListFlow, settings: AppSettings):
    """Render saved receipts, oldest first."""
    receipts = run_async(list_flow.list_receipts())

    if not receipts:
        st.info("No receipts yet. Use 'Add Receipt' to log one.")
        return

    for record in receipts:
        with st.expander(record_label(record, settings)):
            st.markdown(f"**{record_summary(record, settings)}**")

            image = list_flow.image_for_display(record)
            if image is not None:
                st.image(image, width=300)
            else:
                st.caption(NO_IMAGE_PLACEHOLDER)

            if st.button("🗑️ Delete", key=f"delete_{record.id}"):
                try:
                    run_async(list_flow.delete_receipt(record.id))
                except PersistenceError as e:
                    st.error(f"Could not delete the receipt: {e}")
                    continue
                st.rerun()


if __name__ == "__main__":
    main()
