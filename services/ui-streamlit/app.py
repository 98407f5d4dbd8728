import asyncio
from typing import Dict, Optional, Tuple

import streamlit as st

from expense_form import (
    FIELD_LABELS,
    Attachment,
    ExpenseFormController,
    build_form_controller,
)
from shared.observability import setup_telemetry

SERVICE_NAME = "expense-form-ui"
CONTROLLER_KEY = "expense_form_controller"
FIELD_WIDGET_PREFIX = "field_"

# (attribute, placeholder, multiline); order is the on-page order.
FIELD_LAYOUT: Tuple[Tuple[str, str, bool], ...] = (
    ("vendor", "e.g., ACME Supplies", False),
    ("date", "YYYY-MM-DD", False),
    ("bill_ref", "Invoice #, PO #, etc.", False),
    ("description", "What is this expense for?", True),
    ("account_code", "e.g., 6001", False),
    ("quantity", "", False),
    ("amount", "Unit price", False),
    ("taxes", "Tax amount", False),
)


def widget_key(field_name: str) -> str:
    return f"{FIELD_WIDGET_PREFIX}{field_name}"


def get_controller() -> ExpenseFormController:
    controller: Optional[ExpenseFormController] = st.session_state.get(CONTROLLER_KEY)
    if controller is None:
        controller = build_form_controller()
        st.session_state[CONTROLLER_KEY] = controller
    return controller


def init_session_state(controller: ExpenseFormController) -> None:
    # Seed widgets once from the restored draft; afterwards the widgets own their values.
    for field_name, _placeholder, _multiline in FIELD_LAYOUT:
        key = widget_key(field_name)
        if key not in st.session_state:
            st.session_state[key] = controller.field_value(field_name)


def render_fields(controller: ExpenseFormController) -> None:
    values: Dict[str, str] = {}
    left, right = st.columns(2)
    with left:
        values["vendor"] = st.text_input(f"{FIELD_LABELS['vendor']} *", key=widget_key("vendor"), placeholder=FIELD_LAYOUT[0][1])
    with right:
        values["date"] = st.text_input(f"{FIELD_LABELS['date']} *", key=widget_key("date"), placeholder=FIELD_LAYOUT[1][1])

    for field_name, placeholder, multiline in FIELD_LAYOUT[2:4]:
        label = f"{FIELD_LABELS[field_name]} *"
        if multiline:
            values[field_name] = st.text_area(label, key=widget_key(field_name), placeholder=placeholder)
        else:
            values[field_name] = st.text_input(label, key=widget_key(field_name), placeholder=placeholder)

    columns = st.columns(2)
    for index, (field_name, placeholder, _multiline) in enumerate(FIELD_LAYOUT[4:]):
        with columns[index % 2]:
            values[field_name] = st.text_input(
                f"{FIELD_LABELS[field_name]} *",
                key=widget_key(field_name),
                placeholder=placeholder,
            )

    for field_name, value in values.items():
        controller.update_field(field_name, value)


def render_attachment(controller: ExpenseFormController) -> None:
    uploaded = st.file_uploader(
        "Upload / Take Photo of Receipt",
        type=["png", "jpg", "jpeg"],
        key="receipt_upload",
        help="PNG, JPG up to ~10MB",
    )
    if uploaded is None:
        controller.clear_attachment()
        return

    attachment = Attachment(
        name=uploaded.name,
        size_bytes=uploaded.size,
        content_type=uploaded.type,
        content=uploaded.getvalue(),
    )
    controller.set_attachment(attachment)
    preview, details = st.columns([1, 4])
    with preview:
        st.image(attachment.content, caption="Receipt preview", width=64)
    with details:
        st.write(attachment.name)
        st.caption(attachment.size_label)


def render_summary(controller: ExpenseFormController) -> None:
    st.divider()
    note, total = st.columns([3, 2])
    with note:
        st.caption("All fields marked * are required.")
    with total:
        st.metric("Estimated total", f"${controller.estimated_total}")


def render_actions(controller: ExpenseFormController) -> None:
    save_col, submit_col = st.columns(2)
    with save_col:
        save_clicked = st.button("Save", key="save_draft")
    with submit_col:
        submit_clicked = st.button(
            "Submit",
            key="submit_expense",
            type="primary",
            disabled=not controller.can_submit,
        )

    if save_clicked:
        controller.save()
    if submit_clicked:
        with st.spinner("Submitting…"):
            asyncio.run(controller.submit())


def render_notification(controller: ExpenseFormController) -> None:
    notification = controller.notifications.current
    if notification is None:
        return
    if notification.is_error:
        st.error(notification.message)
    else:
        st.success(notification.message)


def main() -> None:
    setup_telemetry(SERVICE_NAME)
    st.title("Accounting App")
    st.subheader("New Expense / Receipt")

    controller = get_controller()
    init_session_state(controller)

    render_fields(controller)
    render_attachment(controller)
    render_summary(controller)
    render_actions(controller)
    render_notification(controller)


if __name__ == "__main__":
    main()
