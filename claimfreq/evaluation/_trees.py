"""Text diagrams of the individual trees in the ensemble.

Built from LightGBM's ``trees_to_dataframe`` so no graph-layout tooling is
needed; each tree prints as an indented split/leaf outline.
"""

import pandas as pd


def tree_table(fitted):
    """One row per node of every tree (LightGBM's tabular tree dump)."""
    return fitted.booster.trees_to_dataframe()


def _is_split(node):
    # leaves carry no child ids (None/NaN)
    return isinstance(node["left_child"], str)


def _count(node):
    # single-leaf trees carry no count
    return "?" if pd.isna(node["count"]) else int(node["count"])


def _format_node(node):
    if not _is_split(node):
        return f"leaf {node['node_index']}: value={node['value']:.6f} (n={_count(node)})"
    return (
        f"{node['node_index']}: {node['split_feature']} {node['decision_type']} "
        f"{node['threshold']:.6g} (gain={node['split_gain']:.4g}, n={_count(node)}, "
        f"missing->{node['missing_direction']})"
    )


def render_tree(fitted, tree_index, table=None):
    """Indented outline of one tree, root first, left branch before right."""
    table = tree_table(fitted) if table is None else table
    nodes = table[table["tree_index"] == tree_index].set_index("node_index", drop=False)
    if nodes.empty:
        raise IndexError(f"tree_index {tree_index} not in model")

    root = nodes[nodes["node_depth"] == 1].index[0]
    lines = [f"Tree {tree_index}"]
    stack = [(root, 0)]
    while stack:
        node_id, depth = stack.pop()
        node = nodes.loc[node_id]
        lines.append("    " * depth + _format_node(node))
        if _is_split(node):
            # pushed right first so left is rendered first
            stack.append((node["right_child"], depth + 1))
            stack.append((node["left_child"], depth + 1))
    return "\n".join(lines)


def render_trees(fitted, limit=None):
    """Yield the diagram of each tree in boosting order."""
    table = tree_table(fitted)
    n_trees = int(table["tree_index"].max()) + 1
    if limit is not None:
        n_trees = min(n_trees, limit)
    for tree_index in range(n_trees):
        yield render_tree(fitted, tree_index, table)
