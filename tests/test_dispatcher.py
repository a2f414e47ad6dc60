"""Tests for the command dispatcher (core/dispatcher.py).

The builder is always a ``MagicMock`` — no files are read and no
backend is started.

Coverage:
* Builder call sequence and arguments per command.
* ``--unix --xen`` help redirect versus fatal ``--xen --socket``.
* Package-management option threading.
* Exception wrapping (foreign builder errors → BuilderError).
* A failing ``load`` stops every command.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, call

import pytest

from mirari.core.dispatcher import Dispatcher
from mirari.core.models import BackendFlags, BackendMode, BuildOptions, Outcome
from mirari.exceptions import BuilderError, ModeConflictError


# ---------------------------------------------------------------------------
# configure
# ---------------------------------------------------------------------------

class TestConfigure:
    def test_call_sequence(self, builder: MagicMock) -> None:
        outcome = Dispatcher(builder).configure(
            BackendFlags(xen=True), file=Path("config.ml"),
        )

        assert outcome == Outcome.success("configured")
        assert builder.mock_calls == [
            call.load(Path("config.ml")),
            call.entry_point("project"),
            call.configure(
                "project",
                BackendMode.XEN,
                "main.ml",
                options=BuildOptions(manage_packages=True),
            ),
        ]

    def test_no_opam_disables_package_management(self, builder: MagicMock) -> None:
        Dispatcher(builder).configure(BackendFlags(), no_opam=True)

        _, kwargs = builder.configure.call_args
        assert kwargs["options"] == BuildOptions(manage_packages=False)

    def test_file_defaults_to_none(self, builder: MagicMock) -> None:
        Dispatcher(builder).configure(BackendFlags())
        builder.load.assert_called_once_with(None)

    @pytest.mark.parametrize("socket", [True, False])
    def test_unix_and_xen_redirects_to_help(
        self, builder: MagicMock, socket: bool,
    ) -> None:
        outcome = Dispatcher(builder).configure(
            BackendFlags(unix=True, xen=True, socket=socket),
        )

        assert outcome.is_help
        assert outcome.topic == "configure"
        assert builder.mock_calls == []

    def test_xen_and_socket_is_fatal_before_any_builder_call(
        self, builder: MagicMock,
    ) -> None:
        with pytest.raises(ModeConflictError, match="--xen and --socket"):
            Dispatcher(builder).configure(BackendFlags(xen=True, socket=True))
        assert builder.mock_calls == []

    def test_socket_mode(self, builder: MagicMock) -> None:
        Dispatcher(builder).configure(BackendFlags(unix=True, socket=True))
        args, _ = builder.configure.call_args
        assert args[1] is BackendMode.UNIX_SOCKET


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

class TestRun:
    def test_call_sequence(self, builder: MagicMock) -> None:
        outcome = Dispatcher(builder).run(BackendFlags(), file=Path("app/config.ml"))

        assert outcome == Outcome.success("ran")
        assert builder.mock_calls == [
            call.load(Path("app/config.ml")),
            call.run("project", BackendMode.UNIX_DIRECT),
        ]

    @pytest.mark.parametrize("socket", [True, False])
    def test_unix_and_xen_redirects_to_help(
        self, builder: MagicMock, socket: bool,
    ) -> None:
        outcome = Dispatcher(builder).run(
            BackendFlags(unix=True, xen=True, socket=socket),
        )

        assert outcome == Outcome.help("run")
        assert builder.mock_calls == []

    def test_xen_and_socket_is_fatal(self, builder: MagicMock) -> None:
        with pytest.raises(ModeConflictError):
            Dispatcher(builder).run(BackendFlags(xen=True, socket=True))
        builder.load.assert_not_called()

    def test_run_never_touches_entry_point(self, builder: MagicMock) -> None:
        Dispatcher(builder).run(BackendFlags(xen=True))
        builder.entry_point.assert_not_called()


# ---------------------------------------------------------------------------
# clean
# ---------------------------------------------------------------------------

class TestClean:
    def test_call_sequence(self, builder: MagicMock) -> None:
        outcome = Dispatcher(builder).clean(file=Path("config.ml"), no_opam=True)

        assert outcome == Outcome.success("cleaned")
        assert builder.mock_calls == [
            call.load(Path("config.ml")),
            call.clean("project", options=BuildOptions(manage_packages=False)),
        ]

    def test_defaults_manage_packages(self, builder: MagicMock) -> None:
        Dispatcher(builder).clean()
        builder.clean.assert_called_once_with(
            "project", options=BuildOptions(manage_packages=True),
        )

    def test_never_resolves_a_mode(
        self, builder: MagicMock, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from mirari.core import dispatcher as dispatcher_module

        resolver = MagicMock()
        monkeypatch.setattr(dispatcher_module, "resolve_mode", resolver)

        Dispatcher(builder).clean()
        resolver.assert_not_called()


# ---------------------------------------------------------------------------
# Builder failures
# ---------------------------------------------------------------------------

class TestBuilderFailures:
    @pytest.mark.parametrize(
        "invoke",
        [
            lambda d: d.configure(BackendFlags()),
            lambda d: d.run(BackendFlags()),
            lambda d: d.clean(),
        ],
        ids=["configure", "run", "clean"],
    )
    def test_failing_load_stops_every_command(
        self, builder: MagicMock, invoke: object,
    ) -> None:
        builder.load.side_effect = FileNotFoundError("No configuration file found.")

        with pytest.raises(BuilderError, match="No configuration file found.") as exc_info:
            invoke(Dispatcher(builder))  # type: ignore[operator]

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert builder.mock_calls == [call.load(None)]

    def test_mirari_errors_propagate_unchanged(self, builder: MagicMock) -> None:
        original = BuilderError("xm create failed", hint="Is xend running?")
        builder.run.side_effect = original

        with pytest.raises(BuilderError) as exc_info:
            Dispatcher(builder).run(BackendFlags(xen=True))
        assert exc_info.value is original

    def test_failure_after_load_is_wrapped(self, builder: MagicMock) -> None:
        builder.configure.side_effect = RuntimeError("make failed")

        with pytest.raises(BuilderError, match="make failed"):
            Dispatcher(builder).configure(BackendFlags())

    def test_empty_message_falls_back_to_type_name(self, builder: MagicMock) -> None:
        builder.clean.side_effect = RuntimeError()

        with pytest.raises(BuilderError, match="RuntimeError"):
            Dispatcher(builder).clean()

    def test_no_retry(self, builder: MagicMock) -> None:
        builder.run.side_effect = OSError("boom")

        with pytest.raises(BuilderError):
            Dispatcher(builder).run(BackendFlags())
        builder.run.assert_called_once()


# ---------------------------------------------------------------------------
# Lazy builder factory
# ---------------------------------------------------------------------------

class TestBuilderFactory:
    def test_factory_not_called_for_help_redirect(self) -> None:
        factory = MagicMock()
        outcome = Dispatcher(builder_factory=factory).configure(
            BackendFlags(unix=True, xen=True),
        )

        assert outcome == Outcome.help("configure")
        factory.assert_not_called()

    def test_factory_not_called_on_mode_conflict(self) -> None:
        factory = MagicMock()
        with pytest.raises(ModeConflictError):
            Dispatcher(builder_factory=factory).run(BackendFlags(xen=True, socket=True))
        factory.assert_not_called()

    def test_factory_called_once(self, builder: MagicMock) -> None:
        factory = MagicMock(return_value=builder)

        outcome = Dispatcher(builder_factory=factory).configure(BackendFlags())

        assert outcome == Outcome.success("configured")
        factory.assert_called_once_with()
        assert len(builder.mock_calls) == 3

    @pytest.mark.parametrize(
        "kwargs",
        [{}, {"builder": MagicMock(), "builder_factory": MagicMock()}],
        ids=["neither", "both"],
    )
    def test_exactly_one_source(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(TypeError):
            Dispatcher(**kwargs)  # type: ignore[arg-type]
