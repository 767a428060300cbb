import base64
import html as htmllib
import json
import logging
import re
from typing import Any, Optional

from .config import ExplorerConfig
from .errors import NotebookParseError
from .models import ContentKind

logger = logging.getLogger(__name__)

_ESCAPES = {
	"&": "&amp;",
	"<": "&lt;",
	">": "&gt;",
	'"': "&quot;",
	"'": "&#39;",
}
_ESCAPE_RE = re.compile(r"[&<>\"']")

_H3 = re.compile(r"^### (.*)$", re.MULTILINE)
_H2 = re.compile(r"^## (.*)$", re.MULTILINE)
_H1 = re.compile(r"^# (.*)$", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_ITALIC = re.compile(r"\*(.*?)\*")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_TAG = re.compile(r"<[^>]*>")

IMAGE_TYPES = ("image/png", "image/jpeg", "image/svg+xml")


def escape_html(s: str) -> str:
	"""Escape &, <, >, double and single quotes."""
	return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], s)


def join_source(source: Any) -> str:
	"""Cell sources and output texts are either a string or a list of fragments."""
	if source is None:
		return ""
	if isinstance(source, list):
		return "".join(str(part) for part in source)
	return str(source)


def render_markdown(text: str) -> str:
	"""
	A small fixed markdown subset: h1-h3, bold, italic, inline code and
	paragraph breaks. The text is escaped before any rule runs.
	"""
	if not text:
		return ""
	html = escape_html(text)
	html = _H3.sub(r"<h3>\1</h3>", html)
	html = _H2.sub(r"<h2>\1</h2>", html)
	html = _H1.sub(r"<h1>\1</h1>", html)
	# Bold first, otherwise the italic rule eats the inner asterisks
	html = _BOLD.sub(r"<strong>\1</strong>", html)
	html = _ITALIC.sub(r"<em>\1</em>", html)
	html = _INLINE_CODE.sub(r"<code>\1</code>", html)
	html = html.replace("\n\n", "</p><p>")
	return f"<p>{html}</p>"


def code_block(code: str, language: str) -> str:
	return f'<pre><code class="language-{escape_html(language)}">{escape_html(code)}</code></pre>'


def preview_text(rendered: str) -> str:
	"""Plain text of rendered markup, as a card shows it."""
	return htmllib.unescape(_TAG.sub("", rendered))


def parse_notebook(raw: str) -> dict:
	"""
	Decode a notebook and check the structure the renderers walk: cells
	are objects, `outputs` lists of objects, `data` payloads mappings.
	"""
	try:
		nb = json.loads(raw)
	except (json.JSONDecodeError, TypeError) as e:
		raise NotebookParseError(f"Invalid notebook JSON: {e}") from e
	if not isinstance(nb, dict):
		raise NotebookParseError("Notebook document must be a JSON object")
	cells = nb.get("cells")
	if cells is not None and not isinstance(cells, list):
		raise NotebookParseError("Notebook 'cells' must be a list")

	for i, cell in enumerate(cells or []):
		if not isinstance(cell, dict):
			raise NotebookParseError(f"Cell {i} is not an object")
		outputs = cell.get("outputs")
		if outputs is None:
			continue
		if not isinstance(outputs, list):
			raise NotebookParseError(f"Cell {i} 'outputs' must be a list")
		for output in outputs:
			if not isinstance(output, dict):
				raise NotebookParseError(f"Cell {i} has an output that is not an object")
			data = output.get("data")
			if data is not None and not isinstance(data, dict):
				raise NotebookParseError(f"Cell {i} has an output whose 'data' is not a mapping")
	return nb


def notebook_language(nb: dict, config: ExplorerConfig) -> str:
	meta = nb.get("metadata")
	if isinstance(meta, dict):
		for section, key in (("language_info", "name"), ("kernelspec", "language")):
			value = meta.get(section)
			if isinstance(value, dict) and isinstance(value.get(key), str) and value[key]:
				return value[key]
	return config.default_language


def _cells(nb: dict):
	return nb.get("cells") or []


# ============ Previews ============

def render_notebook_preview(nb: dict, config: ExplorerConfig) -> str:
	"""Render the first markdown/code cells; other cell types don't count."""
	language = notebook_language(nb, config)
	parts = []
	shown = 0
	for cell in _cells(nb):
		if shown >= config.preview_cells:
			break
		cell_type = cell.get("cell_type")
		if cell_type == "markdown":
			parts.append(render_markdown(join_source(cell.get("source"))))
			shown += 1
		elif cell_type == "code":
			parts.append(code_block(join_source(cell.get("source")).strip(), language))
			shown += 1
	return "".join(parts)


def render_script_preview(text: str, config: ExplorerConfig) -> str:
	head = "\n".join(text.split("\n")[:config.preview_lines])
	return code_block(head, config.default_language)


def render_preview(raw: str, kind: ContentKind, config: ExplorerConfig) -> str:
	if kind == ContentKind.SCRIPT:
		return render_script_preview(raw, config)
	return render_notebook_preview(parse_notebook(raw), config)


# ============ Full views ============

def _image(mime: str, payload: Any) -> str:
	data = join_source(payload)
	if mime == "image/svg+xml" and data.lstrip().startswith("<"):
		# nbformat stores SVG as markup, not base64
		data = base64.b64encode(data.encode("utf-8")).decode("ascii")
	else:
		data = "".join(data.split())
	return f'<img src="data:{mime};base64,{escape_html(data)}" style="max-width:100%;">'


def render_output(output: dict, config: ExplorerConfig) -> Optional[str]:
	"""
	Render one cell output. Images win over text, text/plain wins over
	stream text; figure echoes and unknown outputs render nothing.
	"""
	data = output.get("data") or {}

	for mime in IMAGE_TYPES:
		if data.get(mime):
			return _image(mime, data[mime])

	if data.get("text/plain"):
		text = join_source(data["text/plain"])
		if any(marker in text for marker in config.figure_placeholders):
			return None
		return f'<pre class="out">{escape_html(text)}</pre>'

	if output.get("output_type") == "stream" and output.get("text"):
		return f'<pre class="out">{escape_html(join_source(output["text"]))}</pre>'

	return None


def render_full_notebook(nb: dict, config: ExplorerConfig) -> str:
	language = notebook_language(nb, config)
	parts = []
	for cell in _cells(nb):
		cell_type = str(cell.get("cell_type", ""))
		parts.append(f'<div class="viewer-cell {escape_html(cell_type)}">')
		if cell_type == "markdown":
			parts.append(render_markdown(join_source(cell.get("source"))))
		elif cell_type == "code":
			parts.append(code_block(join_source(cell.get("source")), language))
			for output in cell.get("outputs") or []:
				rendered = render_output(output, config)
				if rendered:
					parts.append(rendered)
		parts.append("</div>")
	return "".join(parts)


def render_full(raw: str, kind: ContentKind, config: ExplorerConfig) -> str:
	if kind == ContentKind.SCRIPT:
		return code_block(raw, config.default_language)
	return render_full_notebook(parse_notebook(raw), config)
