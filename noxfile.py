import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]

# Packages with C extensions that must be rebuilt per Python version.
# Poetry's wheel cache can serve a .so compiled for the wrong interpreter.
_C_EXT_PACKAGES = ["psycopg2-binary"]

_LAYERS = ("domain", "application", "integration", "bdd")
_AREAS = ("identity", "catalogue", "cart", "order", "access", "reviews")


def _install(session: nox.Session) -> None:
    """Install the project with the test and postgresql extras into the nox virtualenv."""
    session.run("poetry", "install", "--all-extras", external=True)
    # Force-rebuild C-extension packages so the .so matches this Python version.
    session.run(
        "pip",
        "install",
        "--force-reinstall",
        "--no-cache-dir",
        *_C_EXT_PACKAGES,
    )


def _layer(layer: str) -> list[str]:
    return [f"tests/{area}/{layer}/" for area in _AREAS]


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
@nox.parametrize("layer", _LAYERS)
def tests_layer(session: nox.Session, layer: str) -> None:
    """Run one test layer; ``domain`` needs no infrastructure at all."""
    _install(session)
    session.run("pytest", *_layer(layer), *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_postgresql(session: nox.Session) -> None:
    """Run the suite against PostgreSQL; ``DATABASE_URL`` must point at a scratch database."""
    _install(session)
    session.run("pytest", "--env", "postgresql", *session.posargs)
