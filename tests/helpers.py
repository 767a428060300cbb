import json

from nbexplorer import RawFileRef


def make_ref(name, text="", full_path=None, relative_path=None):
	return RawFileRef(name=name, reader=lambda: text, full_path=full_path, relative_path=relative_path)


def notebook(*cells, metadata=None) -> str:
	return json.dumps({"cells": list(cells), "metadata": metadata or {}, "nbformat": 4, "nbformat_minor": 5})


def md(source):
	return {"cell_type": "markdown", "source": source}


def code(source, outputs=None):
	return {"cell_type": "code", "source": source, "outputs": outputs or []}


def raw(source):
	return {"cell_type": "raw", "source": source}
