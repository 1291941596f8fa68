"""
Graph builder: parses CSV transfer data and aggregates it into a directed
NetworkX graph with one edge per ordered (payer, payee) pair.
"""
import io
from typing import Dict, List, Tuple

import networkx as nx
import pandas as pd


REQUIRED_COLUMNS = {"sender_id", "receiver_id", "amount", "timestamp"}


def clean_transfers(df: pd.DataFrame) -> pd.DataFrame:
    """Validate columns and coerce types. Rows that fail to parse are dropped."""
    df = df.copy()
    df.columns = df.columns.astype(str).str.strip()
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"CSV missing required columns: {sorted(missing)}")
    # Normalise to naive UTC so monthly periods are unambiguous
    df["timestamp"] = pd.to_datetime(df["timestamp"], errors="coerce", utc=True).dt.tz_localize(None)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    df = df.dropna(subset=["sender_id", "receiver_id", "amount", "timestamp"])
    df["sender_id"] = df["sender_id"].astype(str).str.strip()
    df["receiver_id"] = df["receiver_id"].astype(str).str.strip()
    df = df[(df["sender_id"] != "") & (df["receiver_id"] != "")]
    if (df["amount"] < 0).any():
        bad = df.loc[df["amount"] < 0].index.tolist()[:5]
        raise ValueError(f"Transfer amounts must be non-negative (rows {bad})")
    return df.sort_values("timestamp", kind="stable").reset_index(drop=True)


def parse_csv(file_content: bytes) -> pd.DataFrame:
    """Parse CSV bytes into a cleaned DataFrame."""
    df = pd.read_csv(io.BytesIO(file_content))
    return clean_transfers(df)


def build_graph(df: pd.DataFrame) -> nx.DiGraph:
    """
    Build the transfer graph for one reporting window.

    Edge attrs: total_amount (sum over the window), transaction_count.
    Pairs are added in order of their first transfer.
    """
    G = nx.DiGraph()

    all_accounts = pd.unique(pd.concat([df["sender_id"], df["receiver_id"]]))
    G.add_nodes_from(all_accounts)

    totals = (
        df.groupby(["sender_id", "receiver_id"], sort=False)["amount"]
        .agg(["sum", "count"])
    )
    for (src, dst), row in totals.iterrows():
        G.add_edge(src, dst, total_amount=float(row["sum"]), transaction_count=int(row["count"]))

    return G


def graph_to_flow_input(G: nx.DiGraph) -> Tuple[List[str], List[Dict[str, object]]]:
    """Nodes and {source, target, amount} edges, in node then neighbour insertion order."""
    nodes = list(G.nodes())
    edges = [
        {"source": src, "target": dst, "amount": data.get("total_amount", 0.0)}
        for src, dst, data in G.edges(data=True)
    ]
    return nodes, edges
