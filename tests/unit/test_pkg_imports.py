import pytest


def test_import_package_and_version_smoke():
    import sfclient

    assert isinstance(sfclient.__version__, str)
    assert sfclient.SalesforceClient is not None


def test_main_runs_cli_with_argv(capsys):
    from sfclient.__main__ import main

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert "sfclient" in capsys.readouterr().out
