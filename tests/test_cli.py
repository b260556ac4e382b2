import json

import pytest

from quotedoc.cli.__main__ import main


def test_templates_lists_builtin_keys(capsys):
    main(["templates"])
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "corporate-blue\tCorporate Blue (default)"
    assert len(out) == 3


def test_no_arguments_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1
    assert "Usage:" in capsys.readouterr().err


def test_unknown_command_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["publish", "x.json"])
    assert exc.value.code == 1


def test_unreadable_quotation_exits_2(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["render", str(tmp_path / "missing.json")])
    assert exc.value.code == 2
    assert "Error reading" in capsys.readouterr().err


def test_invalid_json_exits_2(tmp_path):
    bad = tmp_path / "q.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["render", str(bad)])
    assert exc.value.code == 2


def test_render_to_file(tmp_path, quotation_payload):
    src = tmp_path / "q.json"
    src.write_text(json.dumps(quotation_payload), encoding="utf-8")
    out = tmp_path / "out.html"
    main(["render", str(src), "--out=" + str(out)])
    html = out.read_text(encoding="utf-8")
    assert "QUO-202308-0001" in html
    assert '<section class="quotation-page"' in html


def test_render_yaml_with_template_file_as_json(tmp_path, capsys, template_payload):
    src = tmp_path / "q.yaml"
    src.write_text("quotationNumber: Q-7\ncurrency: eur\n", encoding="utf-8")
    tpl = tmp_path / "tpl.json"
    tpl.write_text(json.dumps(template_payload), encoding="utf-8")
    main(["render", str(src), str(tpl), "--json"])
    doc = json.loads(capsys.readouterr().out)
    assert doc["pages"][0]["header"]["html"] == "Quotation #Q-7"


def test_preview_builtin(capsys):
    main(["preview", "executive-gray"])
    assert "Professional Quotation" in capsys.readouterr().out


def test_preview_unknown_template_exits_2():
    with pytest.raises(SystemExit) as exc:
        main(["preview", "no-such-template"])
    assert exc.value.code == 2


def test_unwritable_out_path_exits_2(tmp_path, capsys):
    target = tmp_path / "no-such-dir" / "out.html"
    with pytest.raises(SystemExit) as exc:
        main(["preview", "--out=" + str(target)])
    assert exc.value.code == 2
    assert "Error writing" in capsys.readouterr().err
