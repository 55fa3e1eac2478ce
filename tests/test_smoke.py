"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import toolgate

    assert toolgate.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from toolgate.cli import main

    assert callable(main)


def test_public_imports() -> None:
    from toolgate.config import ConfigLoader, EffectivePolicy, resolve
    from toolgate.runtime import GuardrailsExtension, PolicyEvaluator, TerminalConfirmer
    from toolgate.shell import extract_command_names

    assert ConfigLoader is not None
    assert EffectivePolicy is not None
    assert resolve is not None
    assert GuardrailsExtension is not None
    assert PolicyEvaluator is not None
    assert TerminalConfirmer is not None
    assert extract_command_names is not None


def test_lazy_import_from_toolgate() -> None:
    import toolgate

    assert toolgate.GuardrailsExtension is not None
    assert toolgate.create_extension is not None
