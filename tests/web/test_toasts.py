"""Tests for the toast queue."""

from web.toasts import Toast, ToastQueue


def test_keys_are_translated():
    toasts = ToastQueue("en")
    toast = toasts.success("auth.loginSuccess")
    assert toast == Toast(kind="success", message="Logged in successfully!")


def test_backend_text_is_shown_as_is():
    toasts = ToastQueue("vi")
    toast = toasts.error("Email đã được sử dụng", fallback="auth.registerFailed")
    assert toast.message == "Email đã được sử dụng"


def test_fallback_when_no_message():
    toasts = ToastQueue("vi")
    toast = toasts.error(None, fallback="auth.loginFailed")
    assert toast.message == "Đăng nhập thất bại"


def test_fallback_when_message_empty():
    toasts = ToastQueue("en")
    assert toasts.error("", fallback="groups.actionFailed").message == "Could not complete the action"


def test_params():
    toasts = ToastQueue("vi")
    assert toasts.success("groups.created", name="Hội mèo").message == "Đã tạo nhóm Hội mèo"


def test_drain_empties_queue():
    toasts = ToastQueue("en")
    toasts.info("locale.changed")
    toasts.error("boom")
    assert len(toasts) == 2

    drained = toasts.drain()

    assert [t.kind for t in drained] == ["info", "error"]
    assert len(toasts) == 0
    assert toasts.drain() == []
