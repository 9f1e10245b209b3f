"""Custom helpers -- plain functions and class-based block directives.

Plain functions become inline directives: positional params are passed
positionally, hash params as keywords. Sub-expressions feed one helper's
result into another. A class with a ``call`` method gets full control of
its block, including narrowing.

Run:
    python app.py
"""

from stache import Registry, StringOutput

registry = Registry()


def money(amount, currency="USD"):
    return f"{amount:,.2f} {currency}"


def total(items):
    return sum(item["price"] * item["qty"] for item in items)


class Card:
    """``{{#card title}}body{{/card}}`` wraps its body in a card div."""

    def call(self, d, registry, ctx, rc, out):
        title = d.require_param(0).value
        out.write(f'<div class="card"><h3>{registry.escape(str(title))}</h3>')
        body = StringOutput()
        if d.template is not None:
            d.template.render(registry, ctx, rc, body)
        out.write(body.getvalue().strip())
        out.write("</div>")


registry.helpers.update({"money": money, "total": total})
registry.register_helper("card", Card())
registry.register_helper("upper", lambda s: str(s).upper())

registry.register_template_string(
    "invoice",
    """\
{{#card customer}}
{{#each items}}{{upper name}}: {{money price currency="EUR"}} x {{qty}}
{{/each}}Total: {{money (total items) currency="EUR"}}
{{/card}}""",
)

output = registry.render(
    "invoice",
    {
        "customer": "Ada & Co",
        "items": [
            {"name": "gears", "price": 1250, "qty": 2},
            {"name": "cards", "price": 0.5, "qty": 100},
        ],
    },
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
