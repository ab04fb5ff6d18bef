# tests/test_cli.py

import json
import sys

import pytest

from credport.__main__ import main
from credport.cli import exports as export_cli
from credport.cli import imports as import_cli
from credport.cli import sources as sources_cli
from credport.common.store import JsonFileStore

from conftest import make_credential


@pytest.mark.parametrize("command, module", [
    ("sources", "sources"), ("import", "imports"), ("export", "exports"), ("wizard", "wizard"),
])
def test_main_dispatches_to_command_module(mocker, command, module):
    mocker.patch.object(sys, "argv", ["credport", command, "--help"])
    handler = mocker.patch(f"credport.cli.{module}.main")

    main()
    handler.assert_called_once()


def test_main_rejects_unknown_command(mocker):
    mocker.patch.object(sys, "argv", ["credport", "samsung"])
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 2


def test_import_command_writes_to_vault(mocker, tmp_path, lastpass_csv):
    export = tmp_path / "lastpass.csv"
    export.write_text(lastpass_csv, encoding="utf-8")
    vault = tmp_path / "vault.json"
    mocker.patch.object(sys, "argv", ["credport", "import", str(export), "-s", "lastpass", "--vault", str(vault)])
    mocker.patch("rich.console.Console.status")

    import_cli.main()

    records = JsonFileStore(vault).list_all()
    assert [(r.site, r.username, r.credential.folder) for r in records] == [("example.com", "user@test.com", "Work")]


def test_import_preview_leaves_vault_alone(mocker, tmp_path, lastpass_csv):
    export = tmp_path / "lastpass.csv"
    export.write_text(lastpass_csv, encoding="utf-8")
    vault = tmp_path / "vault.json"
    mocker.patch.object(sys, "argv",
                        ["credport", "import", str(export), "-s", "lastpass", "--preview", "--vault", str(vault)])
    mock_apply = mocker.patch("credport.pipeline.service.ImportPreview.apply")

    import_cli.main()

    mock_apply.assert_not_called()
    assert not vault.exists()


def test_import_flags_map_to_options(mocker):
    mocker.patch.object(sys, "argv", ["credport", "import", "x.csv", "-s", "chrome",
                                      "--update-existing", "--allow-duplicates", "--no-notes"])
    args = import_cli._setup_arg_parser().parse_args(sys.argv[2:])
    options = import_cli.options_from_args(args)

    assert options.update_existing is True
    assert options.skip_duplicates is False
    assert options.validate_urls is True
    assert options.import_notes is False


def test_import_command_exits_on_format_error(mocker, tmp_path):
    export = tmp_path / "broken.xml"
    export.write_text("<KeePassFile>", encoding="utf-8")
    mocker.patch.object(sys, "argv", ["credport", "import", str(export), "-s", "keepass",
                                      "--vault", str(tmp_path / "vault.json")])

    with pytest.raises(SystemExit) as excinfo:
        import_cli.main()
    assert excinfo.value.code == 1


def test_import_command_missing_file(mocker, tmp_path):
    mocker.patch.object(sys, "argv", ["credport", "import", str(tmp_path / "nope.csv"), "-s", "chrome"])
    with pytest.raises(SystemExit) as excinfo:
        import_cli.main()
    assert excinfo.value.code == 1


def test_export_command_writes_json(mocker, tmp_path):
    vault = tmp_path / "vault.json"
    record_id = JsonFileStore(vault).insert(make_credential())
    output = tmp_path / "export.json"
    mocker.patch.object(sys, "argv", ["credport", "export", "-f", "json", "-o", str(output),
                                      "--metadata", "--vault", str(vault)])

    export_cli.main()

    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["passwords"][0]["id"] == record_id


def test_export_command_to_stdout(mocker, tmp_path, capsys):
    vault = tmp_path / "vault.json"
    JsonFileStore(vault).insert(make_credential())
    mocker.patch.object(sys, "argv", ["credport", "export", "-o", "-", "--vault", str(vault)])

    export_cli.main()

    assert capsys.readouterr().out == "site,username,password\nexample.com,user@test.com,password123\n"


def test_export_command_refuses_to_overwrite(mocker, tmp_path):
    output = tmp_path / "existing.csv"
    output.write_text("keep me", encoding="utf-8")
    mocker.patch.object(sys, "argv", ["credport", "export", "-o", str(output), "--vault", str(tmp_path / "v.json")])

    with pytest.raises(SystemExit) as excinfo:
        export_cli.main()
    assert excinfo.value.code == 1
    assert output.read_text(encoding="utf-8") == "keep me"


def test_sources_command_lists_vendors(mocker):
    mocker.patch.object(sys, "argv", ["credport", "sources", "--vendors-only"])
    mock_print = mocker.patch.object(sources_cli.console, "print")

    sources_cli.main()

    table = mock_print.call_args[0][0]
    assert table.row_count == 8
