from __future__ import annotations

import pytest

from portbot.core.errors import ErrorCode
from portbot.output.console import MockConsole, Style
from portbot.output.errors import print_publish_error, publish_error_exit_code
from portbot.services.errors import PublishError, PublishErrorKind


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("tag_not_found", ErrorCode.ENV_ERROR),
        ("checkout_failed", ErrorCode.NETWORK_ERROR),
        ("push_failed", ErrorCode.NETWORK_ERROR),
        ("port_write_failed", ErrorCode.IO_ERROR),
        ("privileged_copy_failed", ErrorCode.IO_ERROR),
        ("checksum_not_found", ErrorCode.BUILD_ERROR),
        ("vcpkg_failed", ErrorCode.BUILD_ERROR),
        ("commit_failed", ErrorCode.BUILD_ERROR),
        ("verification_failed", ErrorCode.BUILD_ERROR),
    ],
)
def test_exit_codes(kind: PublishErrorKind, code: ErrorCode) -> None:
    assert publish_error_exit_code(PublishError(kind=kind, message="x")) == int(code)


def test_print_with_hint() -> None:
    console = MockConsole()
    print_publish_error(
        PublishError(kind="push_failed", message="git push failed", hint="rejected"), console
    )

    assert console.messages == ["error: git push failed", "hint: rejected"]
    assert console.outputs[1].style == Style.DIM


def test_print_without_hint() -> None:
    console = MockConsole()
    print_publish_error(PublishError(kind="vcpkg_failed", message="boom"), console)
    assert console.messages == ["error: boom"]
