"""Host store layer.

The sync core only needs ``select`` and ``subscribe`` from the host's
state container.  :class:`~watchsync.state.store.HostStore` is a small
reference implementation of that contract.
"""
