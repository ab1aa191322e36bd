import logging

import matplotlib.pyplot as plt
import streamlit as st

from abprune import GameTree, GameTreeError, NodeKind, alphabeta, layer_mismatches, minimax_value
from abprune.diagram import draw_tree, fmt_ab
from abprune.samples import SAMPLES, textbook_tree

logger = logging.getLogger(__name__)

KINDS = [NodeKind.MAX, NodeKind.MIN, NodeKind.LEAF]

# =========================
# Session helpers
# =========================
def _tree() -> GameTree:
    return st.session_state.tree

def _labeler(labels):
    """Formatters must not touch st.session_state: widgets may call them after the run."""
    def label(nid: int) -> str:
        return labels.get(nid, f"#{nid}")
    return label

def _describer(tree: GameTree, label):
    def describe(nid: int) -> str:
        kind = tree.node(nid).kind.value if nid in tree else "?"
        return f"{label(nid)} ({kind})"
    return describe

def _invalidate():
    """Any edit makes the last result stale."""
    st.session_state.result = None
    st.session_state.i = 0

def _load(tree: GameTree, labels):
    st.session_state.tree = tree
    st.session_state.labels = dict(labels)
    _invalidate()

def _notify(kind: str, msg: str):
    st.session_state.notice = (kind, msg)

def _run_search():
    try:
        # evaluate a frozen copy so edits can never race the search
        snap = _tree().snapshot()
        result = alphabeta(snap)
    except GameTreeError as exc:
        logger.info("Evaluation failed: %s", exc)
        st.session_state.result = None
        _notify("error", str(exc))
        return
    st.session_state.result = result
    st.session_state.i = len(result.trace) - 1
    st.session_state.check_value = minimax_value(snap, result.root)
    st.session_state.mismatches = layer_mismatches(snap, result.root)

# =========================
# UI / Layout
# =========================
st.set_page_config(page_title="Alpha-Beta Tree Lab", layout="wide")

st.markdown("<h1 style='text-align: center; margin-bottom:0;'>Alpha–Beta Tree Lab</h1>", unsafe_allow_html=True)
st.caption("Build a game tree, give the leaves values, then run alpha–beta and step through the search.")

if "tree" not in st.session_state:
    tree0, labels0 = textbook_tree()
    st.session_state.tree = tree0
    st.session_state.labels = labels0
if "result" not in st.session_state:      st.session_state.result = None
if "i" not in st.session_state:           st.session_state.i = 0
if "notice" not in st.session_state:      st.session_state.notice = None
if "check_value" not in st.session_state: st.session_state.check_value = None
if "mismatches" not in st.session_state:  st.session_state.mismatches = []

tree = _tree()
ids = tree.node_ids()
labels = st.session_state.labels
_label = _labeler(labels)
_describe = _describer(tree, _label)

# ---- Sidebar: editing ----
with st.sidebar:
    st.markdown("### Tree")
    sample = st.selectbox("Sample", list(SAMPLES))
    s1, s2 = st.columns(2)
    if s1.button("Load sample", key="load_sample"):
        _load(*SAMPLES[sample]())
        st.rerun()
    if s2.button("Clear", key="clear"):
        _load(GameTree(), {})
        st.rerun()

    st.markdown("### Add node")
    new_kind = st.radio("Kind", KINDS, format_func=lambda k: k.value, horizontal=True, key="new_kind")
    new_value = st.number_input("Leaf value", value=0, step=1, key="new_value",
                                disabled=new_kind is not NodeKind.LEAF)
    new_label = st.text_input("Label (optional)", key="new_label")
    attach = st.selectbox("Attach under", [None] + ids,
                          format_func=lambda n: "— nothing —" if n is None else _describe(n), key="attach")
    if st.button("Add node", key="add_node"):
        nid = tree.add_node(new_kind, new_value if new_kind is NodeKind.LEAF else None)
        if new_label.strip():
            labels[nid] = new_label.strip()
        if attach is not None:
            tree.add_edge(attach, nid)
        _invalidate()
        st.rerun()

    st.markdown("### Connect")
    if len(ids) >= 2:
        parent = st.selectbox("Parent", ids, format_func=_describe, key="edge_parent")
        child = st.selectbox("Child", ids, index=1, format_func=_describe, key="edge_child")
        if st.button("Add edge", key="add_edge"):
            if (parent, child) in tree.edges():
                _notify("warning", f"{_label(parent)} → {_label(child)} already exists.")
            elif not tree.add_edge(parent, child):
                _notify("warning", f"Cannot connect {_label(parent)} to itself.")
            else:
                _invalidate()
            st.rerun()
        edges = tree.edges()
        if edges:
            gone = st.selectbox("Edge", edges, format_func=lambda e: f"{_label(e[0])} → {_label(e[1])}",
                                key="edge_remove")
            if st.button("Remove edge", key="remove_edge"):
                tree.remove_edge(*gone)
                _invalidate()
                st.rerun()
    else:
        st.caption("Add at least two nodes to connect them.")

    st.markdown("### Edit node")
    if ids:
        target = st.selectbox("Node", ids, format_func=_describe, key="edit_target")
        node = tree.node(target)
        kind = st.radio("Kind", KINDS, index=KINDS.index(node.kind), format_func=lambda k: k.value,
                        horizontal=True, key=f"edit_kind_{target}")
        current = 0 if node.value is None else node.value
        value = st.number_input("Value (used when the node has no children)", value=current,
                                step=1 if isinstance(current, int) else 1.0, key=f"edit_value_{target}")
        e1, e2 = st.columns(2)
        if e1.button("Apply", key="apply_edit"):
            tree.set_kind(target, kind)
            tree.set_value(target, value)
            _invalidate()
            st.rerun()
        if e2.button("Remove node", key="remove_node"):
            tree.remove_node(target)
            labels.pop(target, None)
            _invalidate()
            st.rerun()
    else:
        st.caption("The tree is empty.")

# ---- Main: evaluation ----
if st.session_state.notice:
    kind, msg = st.session_state.notice
    (st.error if kind == "error" else st.warning)(msg)
    st.session_state.notice = None

c1, c2 = st.columns([1, 1])
with c1:
    if st.button("Evaluate", key="evaluate", type="primary"):
        _run_search()
        st.rerun()
with c2:
    show_ab = st.checkbox("Show α/β on nodes", value=True)

result = st.session_state.result

if result is None:
    if len(tree):
        fig = draw_tree(tree, labels=labels, title="Game tree")
        st.pyplot(fig)
        plt.close(fig)
    else:
        st.info("Add a node in the sidebar to start.")
else:
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Optimal value", result.optimal_value)
    m2.metric("Visited nodes", f"{result.visited:,}")
    m3.metric("Pruned edges", f"{len(result.pruned_edges):,}")
    m4.metric("Minimax (no pruning)", st.session_state.check_value)

    st.markdown("**Optimal path:** " + " → ".join(_label(n) for n in result.optimal_path))
    if result.pruned_edges:
        pr = ", ".join(f"{_label(u)}→{_label(v)}" for (u, v) in sorted(result.pruned_edges))
        st.markdown(f"**Pruned edges:** {pr}")
    if st.session_state.mismatches:
        names = ", ".join(_label(n) for n in st.session_state.mismatches)
        st.warning(f"Declared kind ignored for {names}: layers alternate MAX/MIN from the root.")

    n_steps = len(result.trace)
    n1, n2, n3, n4 = st.columns([1, 1, 1, 2])
    with n1:
        if st.button("⟵ Back", key="step_back"):
            st.session_state.i = max(0, st.session_state.i - 1)
    with n2:
        if st.button("Next ⟶", key="step_next"):
            st.session_state.i = min(n_steps - 1, st.session_state.i + 1)
    with n3:
        if st.button("Start", key="step_start"):
            st.session_state.i = 0
    with n4:
        st.write(f"Visit {st.session_state.i + 1} / {n_steps}")

    i = st.session_state.i
    fig = draw_tree(tree, result, step=i, labels=labels, show_alpha_beta=show_ab,
                    title=f"Alpha–Beta — visit {i + 1}")
    st.pyplot(fig)
    plt.close(fig)

    with st.expander("Visit trace", expanded=False):
        rows = []
        for k, rec in enumerate(result.trace, start=1):
            a_str, b_str = fmt_ab(rec.alpha, rec.beta)
            rows.append({
                "#": k,
                "node": _label(rec.node_id),
                "depth": rec.depth,
                "mode": "MAX" if rec.maximizing else "MIN",
                "α": a_str,
                "β": b_str,
            })
        st.table(rows)

with st.expander("Legend"):
    st.markdown(
        "**Nodes:** Yellow=current visit, Green=optimal path (after the last visit), "
        "Pale green=visited, Grey=pruned child, Blue=unvisited.\n\n"
        "**Edges:** thick teal=optimal path, dashed grey=pruned, dark=explored or untouched.\n\n"
        "A node with no children is scored as a leaf with its value, whatever kind it is declared as."
    )
