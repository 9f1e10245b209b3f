"""DictLoader -- partials from an in-memory dictionary.

The page is registered explicitly; its partials come from a DictLoader and
are parsed on demand. ``{{> card person}}`` narrows the partial to one
person, so the partial reads ``{{name}}`` instead of ``{{person.name}}``.

Run:
    python app.py
"""

from stache import DictLoader, Registry

partials = {
    "card": """\
<div class="card">
  <h2>{{name}}</h2>
  {{> address addr}}
</div>
""",
    "address": "<p>{{city}}, {{country}} (team {{../../team}})</p>",
}

registry = Registry(loader=DictLoader(partials))
registry.register_template_string(
    "page",
    """\
<h1>{{team}}</h1>
{{#each people}}{{> card}}{{/each}}""",
)

output = registry.render(
    "page",
    {
        "team": "Analytical Engines",
        "people": [
            {"name": "Ada", "addr": {"city": "London", "country": "UK"}},
            {"name": "Grace", "addr": {"city": "Arlington", "country": "USA"}},
        ],
    },
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
