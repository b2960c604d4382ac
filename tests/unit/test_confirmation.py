import pytest

from conftest import make_entry, make_request
from fman.confirmation import (
    ConfirmationPolicy, Decision, make_console_responder, needs_confirmation,
)
from fman.models import EntryKind, OperationKind


# -------------------------------
# needs_confirmation
# -------------------------------
def test_no_confirmation_when_flag_off():
    request = make_request(OperationKind.DELETE, "/x", confirm=False)
    assert not needs_confirmation(request, make_entry(depth=0))


def test_delete_confirms_every_entry():
    request = make_request(OperationKind.DELETE, "/x", confirm=True)
    assert needs_confirmation(request, make_entry(depth=0))
    assert needs_confirmation(request, make_entry(depth=3))


@pytest.mark.parametrize("kind", [OperationKind.COPY, OperationKind.MOVE])
def test_transfer_confirms_top_level_sources_only(kind):
    request = make_request(kind, "/x", "/y", confirm=True)
    assert needs_confirmation(request, make_entry(depth=0))
    assert not needs_confirmation(request, make_entry(depth=1))


def test_policy_without_responder_skips():
    policy = ConfirmationPolicy()
    assert policy.ask(make_entry()) == Decision.SKIP


def test_policy_delegates_to_responder():
    seen = []

    def responder(entry):
        seen.append(entry.name)
        return Decision.CANCEL_ALL

    policy = ConfirmationPolicy(responder)
    assert policy.ask(make_entry("x.bin")) == Decision.CANCEL_ALL
    assert seen == ["x.bin"]


# -------------------------------
# console responder
# -------------------------------
def scripted(*answers):
    remaining = list(answers)
    prompts = []

    def read(prompt):
        prompts.append(prompt)
        return remaining.pop(0)

    return read, prompts


@pytest.mark.parametrize("answer,expected", [
    ("y", Decision.PROCEED),
    ("YES", Decision.PROCEED),
    ("n", Decision.SKIP),
    ("", Decision.SKIP),
    ("q", Decision.CANCEL_ALL),
])
def test_console_responder_answers(answer, expected):
    read, _ = scripted(answer)
    respond = make_console_responder(OperationKind.DELETE, input_func=read)
    assert respond(make_entry()) == expected


def test_console_responder_reprompts_on_invalid_answer():
    read, prompts = scripted("maybe", "y")
    messages = []
    respond = make_console_responder(OperationKind.COPY, input_func=read,
                                     print_func=messages.append)

    assert respond(make_entry("big.iso")) == Decision.PROCEED
    assert len(prompts) == 2
    assert "big.iso" in prompts[0]
    assert len(messages) == 1


def test_console_responder_mentions_subtree_for_directories():
    read, prompts = scripted("n")
    respond = make_console_responder(OperationKind.DELETE, input_func=read)
    respond(make_entry("photos", kind=EntryKind.DIRECTORY))
    assert "하위 항목" in prompts[0]


def test_console_responder_eof_cancels_all():
    def read(prompt):
        raise EOFError

    respond = make_console_responder(OperationKind.MOVE, input_func=read)
    assert respond(make_entry()) == Decision.CANCEL_ALL


def test_console_responder_uses_builtin_input_at_call_time(monkeypatch):
    respond = make_console_responder(OperationKind.DELETE)
    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    assert respond(make_entry()) == Decision.PROCEED
