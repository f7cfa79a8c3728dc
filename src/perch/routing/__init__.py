"""Routing — per-model route entries compiled into an immutable trie.

Views are declared at startup (and may still be declared while serving);
the registry compiles them lazily and swaps the compiled router in as a
single reference.
"""
