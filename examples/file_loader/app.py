"""FileSystemLoader -- templates and partials from a directory.

``templates/page.hbs`` includes ``templates/partials/post.hbs`` by name;
subdirectories become ``/`` in template names.

Run:
    python app.py
"""

from pathlib import Path

from stache import FileSystemLoader, Registry

templates_dir = Path(__file__).parent / "templates"
registry = Registry(loader=FileSystemLoader(templates_dir))

output = registry.render(
    "page",
    {
        "title": "Blog",
        "site": "example.org",
        "posts": [
            {"title": "Scopes", "author": {"name": "Ada"}},
            {"title": "Anonymous post"},
        ],
    },
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
