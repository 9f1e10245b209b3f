"""Hello World -- the simplest stache example.

Render a template string against a dict. No templates directory needed.

Run:
    python app.py
"""

from stache import Registry

registry = Registry()

# Register once, render many times
registry.register_template_string("hello", "Hello, {{name}}!")

output = registry.render("hello", {"name": "World"})


def main() -> None:
    print(output)
    print()

    for name in ["Stache", "Mustache", "Python"]:
        print(registry.render("hello", {"name": name}))


if __name__ == "__main__":
    main()
