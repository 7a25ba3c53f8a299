import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

UNSAFE_SCHEMES = ("javascript:", "vbscript:")

EXTENSIONS = ["fenced_code", "tables", "sane_lists", "codehilite"]
EXTENSION_CONFIGS = {
    # highlight.js picks up the language-* classes on the client
    "codehilite": {"use_pygments": False, "guess_lang": False},
}


class SafeLinkTreeprocessor(Treeprocessor):
    def run(self, root):
        for element in root.iter():
            for attr in ("href", "src"):
                value = element.get(attr)
                if value and value.strip().lower().startswith(UNSAFE_SCHEMES):
                    element.set(attr, "#")


class EscapeHtmlExtension(Extension):
    """Raw HTML in the source is rendered as text instead of markup."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.treeprocessors.register(SafeLinkTreeprocessor(md), "safe_links", 0)


def render_markdown(text):
    return markdown.markdown(
        text or "",
        extensions=EXTENSIONS + [EscapeHtmlExtension()],
        extension_configs=EXTENSION_CONFIGS,
        output_format="html",
    )
