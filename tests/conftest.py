import pytest

from nbexplorer import ExplorerSession
from tests.helpers import make_ref, md, notebook


@pytest.fixture
def session():
	return ExplorerSession()


@pytest.fixture
def loaded_session(session):
	"""Session over a/b/x.ipynb, a/y.py and z.py."""
	session.load([
		make_ref("x.ipynb", notebook(md("# X")), full_path="a/b/x.ipynb"),
		make_ref("y.py", "print('y')\n", full_path="a/y.py"),
		make_ref("z.py", "print('z')\n"),
	])
	return session
