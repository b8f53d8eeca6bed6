from __future__ import annotations

import importlib
import pkgutil

from .. import logs

log = logs.get(__name__)


def import_module(modname: str, pkgname: str | None = None) -> Exception | None:
    """Import a module, optionally relative to *pkgname*."""
    name = '.'.join(filter(None, [pkgname, modname]))
    try:
        log.debug('loading: %s', name)
        if pkgname:
            importlib.import_module(f'.{modname}', pkgname)
        else:
            importlib.import_module(modname)
    except Exception as exc:
        return exc
    return None


def import_package(pkgname: str) -> dict[str, Exception]:
    """Import all modules in *pkgname* and return any exceptions that occur."""
    exceptions: dict[str, Exception] = {}
    pkg = importlib.import_module(pkgname)
    for _, modname, ispkg in pkgutil.iter_modules(pkg.__path__):
        if ispkg:
            continue
        exc = import_module(modname, pkgname)
        if exc:
            exceptions[modname] = exc
    return exceptions
