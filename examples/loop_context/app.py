"""Loop context -- @index, @first, @last and @key inside {{#each}}.

Each iteration gets its own layer of local variables. A nested narrowing
directive sees its own layer first and reaches the loop's through ``@../``.

Run:
    python app.py
"""

from stache import Registry

registry = Registry()
registry.register_template_string(
    "table",
    """\
<table>
{{#each items as |item i|~}}
  <tr class="{{#if @first}}first{{/if}}{{#if @last}}last{{/if}}"><td>{{i}}</td><td>{{item.label}}</td>{{#with item.tags}}<td>{{@../index}}:{{length}}</td>{{/with}}</tr>
{{/each~}}
</table>
{{#each totals}}{{@key}}={{this}};{{/each}}""",
)

items = [
    {"label": "Alpha", "tags": {"length": 2}},
    {"label": "Beta", "tags": {"length": 0}},
    {"label": "Gamma", "tags": {"length": 5}},
    {"label": "Delta", "tags": {"length": 1}},
]
output = registry.render("table", {"items": items, "totals": {"rows": 4, "tags": 8}})


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
