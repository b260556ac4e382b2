# quotedoc/cli/__main__.py
import json
import sys
from pathlib import Path

import yaml

from quotedoc.core.compose import compose
from quotedoc.services.quote_document import render_document_html
from quotedoc.services.template_library import (
    default_template,
    get_builtin_template,
    list_builtin_templates,
    sample_quotation,
)

USAGE = """Usage:
  python -m quotedoc.cli render <quotation.(json|yaml)> [template] [--out=out.html] [--json]
  python -m quotedoc.cli preview [template] [--out=out.html] [--json]
  python -m quotedoc.cli templates

[template] is a JSON/YAML file or a built-in key (default: the default built-in).

Examples:
  python -m quotedoc.cli render quotation.json --out=out.html
  python -m quotedoc.cli render quotation.yaml executive-gray --json
  python -m quotedoc.cli preview modern-minimalist --out=preview.html
"""


def _usage():
    print(USAGE, file=sys.stderr)
    sys.exit(1)


def _load_data(p: str):
    path = Path(p)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error reading '{p}': {e}", file=sys.stderr)
        sys.exit(2)


def _load_template(ref):
    if ref is None:
        return default_template()
    if Path(ref).is_file():
        return _load_data(ref)
    tpl = get_builtin_template(ref)
    if tpl is None:
        print(f"Unknown template '{ref}' (not a file or built-in key)", file=sys.stderr)
        sys.exit(2)
    return tpl


def _emit(output: str, out_path):
    if out_path:
        try:
            Path(out_path).write_text(output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing '{out_path}': {e}", file=sys.stderr)
            sys.exit(2)
    else:
        sys.stdout.write(output)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        _usage()

    cmd = args[0].lower()
    out_path = None
    as_json = False
    positional = []

    # optional args, order-agnostic
    for arg in args[1:]:
        if arg.startswith("--out="):
            out_path = arg.split("=", 1)[1]
        elif arg == "--json":
            as_json = True
        elif arg.startswith("--"):
            continue
        else:
            positional.append(arg)

    if cmd == "templates":
        for entry in list_builtin_templates():
            marker = " (default)" if entry["isDefault"] else ""
            print(f"{entry['key']}\t{entry['name']}{marker}")
        return

    if cmd == "render":
        if not positional:
            _usage()
        quotation = _load_data(positional[0])
        template_ref = positional[1] if len(positional) > 1 else None
    elif cmd == "preview":
        quotation = sample_quotation()
        template_ref = positional[0] if positional else None
    else:
        _usage()

    document = compose(_load_template(template_ref), quotation)
    if as_json:
        _emit(json.dumps(document.model_dump(mode="json"), ensure_ascii=False, indent=2), out_path)
    else:
        _emit(render_document_html(document), out_path)


if __name__ == "__main__":
    main()
