"""Strict mode -- catch typos in paths instead of rendering blanks.

With ``strict_mode=True`` an output path that does not resolve raises
PathNotFoundError with the template location, the offending line and a
"Did you mean?" hint drawn from the keys in scope. Block directives stay
lenient, so ``{{#if}}`` and ``{{else}}`` still handle optional data.

Run:
    python app.py
"""

from stache import PathNotFoundError, Registry

registry = Registry(strict_mode=True)
registry.register_template_string(
    "user.hbs",
    """\
<h1>{{user.name}}</h1>
{{#with user}}
  <p>{{emial}}</p>
{{/with}}""",
)
registry.register_template_string(
    "optional.hbs",
    "{{#if user.nickname}}aka {{user.nickname}}{{else}}no nickname{{/if}}",
)

data = {"user": {"name": "Ada", "email": "ada@example.org"}}

try:
    registry.render("user.hbs", data)
except PathNotFoundError as exc:
    error = exc
    report = exc.format_compact()

output = registry.render("optional.hbs", data)


def main() -> None:
    print(report)
    print()
    print(output)


if __name__ == "__main__":
    main()
