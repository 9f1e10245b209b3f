"""Scoping -- narrowing with {{#with}}, climbing with ../ and block params.

Every narrowing directive pushes a path root. ``../`` climbs one directive
per step, ``@root`` jumps to the top, and ``as |name|`` keeps an outer value
addressable from any depth below.

Run:
    python app.py
"""

from stache import Registry

registry = Registry()
registry.register_template_string(
    "profile",
    """\
{{#with person as |p|~}}
  {{name}} lives in {{#with addr}}{{city}}, {{country}} ({{../name}}'s home, {{p.name}} again, {{@root.source}}){{/with}}
{{~/with}}
{{#with missing}}never{{else}}no {{@root.source}} record for missing{{/with}}""",
)

data = {
    "source": "registry",
    "person": {"name": "Ada", "addr": {"city": "London", "country": "UK"}},
}
output = registry.render("profile", data)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
