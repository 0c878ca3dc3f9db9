"""Generators for diagrams and documentation."""

from transitlink.generators.mermaid import generate_mermaid
from transitlink.generators.dot import generate_dot
from transitlink.generators.markdown import generate_network_doc, generate_index

__all__ = [
    "generate_mermaid",
    "generate_dot",
    "generate_network_doc",
    "generate_index",
]
