"""Minimal stand-in for yq used by the tests.

Understands ``<path>, <path> | line`` for plain dotted paths with integer
indexes, reads documents from stdin and prints one ``value``/``line`` pair
per document, separated by ``---`` the way yq does. Invalid YAML makes it
exit non-zero with the parser error on stderr. ``FAKE_YQ_SLEEP`` delays
startup by that many seconds.
"""

import os
import re
import sys
import time

import yaml

TOKEN = re.compile(r"\.([A-Za-z_][\w-]*)|\[(\d+)\]")


def parse_path(expression):
    first = expression.split(",")[0].strip()
    return [name or int(index) for name, index in TOKEN.findall(first)]


def lookup(node, steps):
    for step in steps:
        if isinstance(step, int):
            if not isinstance(node, yaml.SequenceNode) or step >= len(node.value):
                return None
            node = node.value[step]
            continue
        if not isinstance(node, yaml.MappingNode):
            return None
        for key_node, value_node in node.value:
            if key_node.value == step:
                node = value_node
                break
        else:
            return None
    return node


def main():
    delay = float(os.environ.get("FAKE_YQ_SLEEP", "0"))
    if delay:
        time.sleep(delay)

    steps = parse_path(sys.argv[-1])
    try:
        documents = list(yaml.compose_all(sys.stdin.read()))
    except yaml.YAMLError as exc:
        sys.stderr.write(f"Error: bad file '-': {exc}\n")
        return 1

    chunks = []
    for document in documents:
        node = lookup(document, steps)
        if node is None or not isinstance(node, yaml.ScalarNode):
            chunks.append("null\n0\n")
        else:
            chunks.append(f"{node.value}\n{node.start_mark.line + 1}\n")
    sys.stdout.write("---\n".join(chunks))
    return 0


if __name__ == "__main__":
    sys.exit(main())
