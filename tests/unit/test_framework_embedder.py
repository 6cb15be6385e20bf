"""Tests for framework embedding over in-memory capabilities."""

from __future__ import annotations

from pathlib import Path

import pytest

from embedding.actions import BuildAction
from embedding.embedder import FrameworkEmbedder
from embedding.environment import BUILD_SETTING_KEYS
from embedding.errors import (
    CopyFailedError,
    FrameworksFolderCreationError,
    IncompleteEnvironmentError,
    MissingDependencyError,
    SigningFailedError,
    UnsupportedArchitectureError,
)
from tests.test_helpers.build_settings import make_environment
from tests.test_helpers.fakes import (
    InMemoryFileHandler,
    RecordingSigner,
    StaticArchitectureInspector,
)

FRAMEWORK = Path("/deps/Foo.framework")
DSYM = Path("/deps/Foo.framework.dSYM")


def _file_handler(*, with_dsym: bool = True, **kwargs: object) -> InMemoryFileHandler:
    handler = InMemoryFileHandler(**kwargs)  # type: ignore[arg-type]
    handler.add_file(FRAMEWORK / "Foo", b"\xca\xfe\xba\xbe")
    handler.add_file(FRAMEWORK / "Info.plist", b"<plist/>")
    handler.add_folder(FRAMEWORK / "Headers")
    if with_dsym:
        handler.add_file(DSYM / "Contents/Resources/DWARF/Foo", b"dwarf")
    return handler


def _embedder(
    handler: InMemoryFileHandler,
    *,
    archs: tuple[str, ...] | None = ("arm64",),
    signer: RecordingSigner | None = None,
) -> FrameworkEmbedder:
    return FrameworkEmbedder(
        file_handler=handler,
        inspector=StaticArchitectureInspector(archs),
        signer=signer or RecordingSigner(),
    )


def test_install_embeds_into_built_products() -> None:
    """Install copies the bundle and its dSYM under BUILT_PRODUCTS_DIR."""
    handler = _file_handler()
    report = _embedder(handler).embed(FRAMEWORK, make_environment(action=BuildAction.INSTALL))

    assert report.framework == Path("/out/Frameworks/Foo.framework")
    assert handler.files[Path("/out/Frameworks/Foo.framework/Foo")] == b"\xca\xfe\xba\xbe"
    assert handler.is_folder(Path("/out/Frameworks/Foo.framework/Headers"))
    assert report.dsym == Path("/dsyms/Foo.framework.dSYM")
    assert handler.exists(Path("/dsyms/Foo.framework.dSYM/Contents/Resources/DWARF/Foo"))
    assert report.architectures == ("arm64",)
    assert report.signed is False


def test_clean_embeds_into_target_build_dir() -> None:
    """Non-install actions embed under TARGET_BUILD_DIR."""
    handler = _file_handler()
    report = _embedder(handler).embed(FRAMEWORK, make_environment(action=BuildAction.CLEAN))

    assert report.framework == Path("/intermediate/Frameworks/Foo.framework")
    assert not handler.exists(Path("/out/Frameworks"))


def test_missing_dependency_fails_before_any_mutation() -> None:
    """A path that does not exist is rejected without touching the file system."""
    handler = InMemoryFileHandler()
    with pytest.raises(MissingDependencyError) as excinfo:
        _embedder(handler).embed(FRAMEWORK, make_environment())
    assert excinfo.value.path == FRAMEWORK
    assert handler.mutations == []


def test_unsupported_architecture_fails_without_copying() -> None:
    """No overlap with VALID_ARCHS is rejected before anything is copied."""
    handler = _file_handler()
    environment = make_environment(valid_architectures=("arm64", "arm64e"))
    with pytest.raises(UnsupportedArchitectureError) as excinfo:
        _embedder(handler, archs=("x86_64", "i386")).embed(FRAMEWORK, environment)
    assert excinfo.value.architectures == ("x86_64", "i386")
    assert handler.mutations == []


def test_partial_architecture_overlap_is_accepted() -> None:
    """One shared architecture is enough; the bundle is copied as-is."""
    handler = _file_handler()
    environment = make_environment(valid_architectures=("arm64",))
    report = _embedder(handler, archs=("x86_64", "arm64")).embed(FRAMEWORK, environment)
    assert report.architectures == ("x86_64", "arm64")
    assert handler.files[report.framework / "Foo"] == b"\xca\xfe\xba\xbe"


def test_undeterminable_architectures_skip_the_check(caplog: pytest.LogCaptureFixture) -> None:
    """When lipo cannot tell, embedding proceeds and a warning is logged."""
    handler = _file_handler()
    report = _embedder(handler, archs=None).embed(FRAMEWORK, make_environment())
    assert report.architectures is None
    assert handler.exists(report.framework)
    assert "skipping" in caplog.text


def test_empty_valid_architectures_impose_no_constraint() -> None:
    """An empty VALID_ARCHS accepts any framework."""
    handler = _file_handler()
    environment = make_environment(valid_architectures=())
    report = _embedder(handler, archs=("x86_64",)).embed(FRAMEWORK, environment)
    assert handler.exists(report.framework)


def test_architectures_are_read_from_framework_binary() -> None:
    """The inspected binary is Foo.framework/Foo."""
    handler = _file_handler()
    inspector = StaticArchitectureInspector(("arm64",))
    embedder = FrameworkEmbedder(file_handler=handler, inspector=inspector, signer=RecordingSigner())
    embedder.embed(FRAMEWORK, make_environment())
    assert inspector.calls == [FRAMEWORK / "Foo"]


def test_existing_embedded_copy_is_replaced() -> None:
    """Stale files from a previous embed never survive."""
    handler = _file_handler()
    handler.add_file(Path("/out/Frameworks/Foo.framework/Stale.txt"))
    handler.add_file(Path("/dsyms/Foo.framework.dSYM/Old"))

    report = _embedder(handler).embed(FRAMEWORK, make_environment())

    assert not handler.exists(Path("/out/Frameworks/Foo.framework/Stale.txt"))
    assert not handler.exists(Path("/dsyms/Foo.framework.dSYM/Old"))
    assert handler.exists(report.framework / "Foo")
    assert ("delete", Path("/out/Frameworks/Foo.framework")) in handler.mutations


def test_frameworks_folder_is_created_when_missing() -> None:
    """The frameworks folder is created before copying."""
    handler = _file_handler(with_dsym=False)
    _embedder(handler).embed(FRAMEWORK, make_environment())
    assert handler.mutations[0] == ("create_folder", Path("/out/Frameworks"))


def test_missing_dsym_is_not_an_error() -> None:
    """The dSYM copy is best-effort."""
    handler = _file_handler(with_dsym=False)
    report = _embedder(handler).embed(FRAMEWORK, make_environment())
    assert report.dsym is None
    assert not handler.exists(Path("/dsyms"))


def test_empty_dsym_folder_skips_dsym_copy() -> None:
    """No DWARF_DSYM_FOLDER_PATH means no dSYM copy."""
    handler = _file_handler()
    report = _embedder(handler).embed(FRAMEWORK, make_environment(dwarf_dsym_folder_path=""))
    assert report.dsym is None
    assert not handler.exists(Path("/dsyms/Foo.framework.dSYM"))


@pytest.mark.parametrize("valid_architectures", [("arm64",), ("x86_64",), ()])
def test_signing_not_required_never_signs(valid_architectures: tuple[str, ...]) -> None:
    """CODE_SIGNING_REQUIRED=NO never invokes the signer."""
    handler = _file_handler()
    signer = RecordingSigner()
    environment = make_environment(
        code_signing_required="NO",
        code_signing_allowed="YES",
        valid_architectures=valid_architectures,
    )
    report = _embedder(handler, archs=None, signer=signer).embed(FRAMEWORK, environment)
    assert signer.calls == []
    assert report.signed is False


def test_signing_not_allowed_never_signs() -> None:
    """CODE_SIGNING_ALLOWED=NO never invokes the signer."""
    handler = _file_handler()
    signer = RecordingSigner()
    environment = make_environment(code_signing_required="YES", code_signing_allowed="NO")
    _embedder(handler, signer=signer).embed(FRAMEWORK, environment)
    assert signer.calls == []


def test_signs_the_copied_bundle() -> None:
    """Signing targets the embedded copy with the configured identity and flags."""
    handler = _file_handler()
    signer = RecordingSigner()
    environment = make_environment(
        code_signing_required="YES",
        code_signing_allowed="YES",
        other_code_sign_flags="--timestamp=none --deep",
    )
    report = _embedder(handler, signer=signer).embed(FRAMEWORK, environment)

    assert signer.calls == [
        (
            Path("/out/Frameworks/Foo.framework"),
            "ABCDEF0123456789",
            ("--timestamp=none", "--deep"),
        )
    ]
    assert report.signed is True


def test_signing_identity_falls_back_to_name() -> None:
    """An empty identity falls back to EXPANDED_CODE_SIGN_IDENTITY_NAME."""
    handler = _file_handler()
    signer = RecordingSigner()
    environment = make_environment(
        code_signing_required="YES",
        code_signing_allowed="YES",
        expanded_code_sign_identity="",
    )
    _embedder(handler, signer=signer).embed(FRAMEWORK, environment)
    assert signer.calls[0][1] == "Apple Development: Jane Doe (TEAM123)"


def test_signing_without_identity_fails() -> None:
    """Signing is required but no identity is configured."""
    handler = _file_handler()
    environment = make_environment(
        code_signing_required="YES",
        code_signing_allowed="YES",
        expanded_code_sign_identity="",
        expanded_code_sign_identity_name="",
    )
    with pytest.raises(SigningFailedError, match="no code signing identity"):
        _embedder(handler).embed(FRAMEWORK, environment)


def test_signing_failure_is_retryable_without_cleanup() -> None:
    """A failed signature leaves the copy in place and a re-run succeeds."""
    handler = _file_handler()
    environment = make_environment(code_signing_required="YES", code_signing_allowed="YES")

    with pytest.raises(SigningFailedError) as excinfo:
        _embedder(handler, signer=RecordingSigner(returncode=1)).embed(FRAMEWORK, environment)
    assert "errSecInternalComponent" in str(excinfo.value)
    assert handler.exists(Path("/out/Frameworks/Foo.framework/Foo"))

    signer = RecordingSigner()
    report = _embedder(handler, signer=signer).embed(FRAMEWORK, environment)
    assert report.signed is True
    assert len(signer.calls) == 1


def test_folder_creation_failure_is_typed() -> None:
    """Folder creation errors surface as FrameworksFolderCreationError."""
    handler = _file_handler(fail_on=("create_folder",))
    with pytest.raises(FrameworksFolderCreationError) as excinfo:
        _embedder(handler).embed(FRAMEWORK, make_environment())
    assert isinstance(excinfo.value.__cause__, PermissionError)


def test_copy_failure_is_typed_and_halts() -> None:
    """Copy errors surface as CopyFailedError and later steps do not run."""
    handler = _file_handler(fail_on=("copy",))
    signer = RecordingSigner()
    environment = make_environment(code_signing_required="YES", code_signing_allowed="YES")
    with pytest.raises(CopyFailedError):
        _embedder(handler, signer=signer).embed(FRAMEWORK, environment)
    assert signer.calls == []
    assert not handler.exists(Path("/dsyms"))


def test_incomplete_ambient_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an explicit snapshot, missing build settings raise."""
    for key in BUILD_SETTING_KEYS:
        monkeypatch.delenv(key, raising=False)
    handler = _file_handler()
    with pytest.raises(IncompleteEnvironmentError) as excinfo:
        _embedder(handler).embed(FRAMEWORK)
    assert excinfo.value.missing == BUILD_SETTING_KEYS
    assert handler.mutations == []
