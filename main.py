from __future__ import annotations
import streamlit as st
import asyncio
import io
import pandas as pd
import numpy as np
from pathlib import Path
from typing import List
import matplotlib.pyplot as plt
import networkx as nx

from text_titler.config import DEFAULT_SETTINGS_PATH, Settings, load_settings, save_settings
from text_titler.datatypes import ORDER_BY_OCCURRENCE, ORDER_BY_RANK, Graph
from text_titler.errors import ConfigurationError, EmptyDocumentError
from text_titler.extraction import extract_context, strip_image_embeds
from text_titler.features import compute_similarity_matrix
from text_titler.graphing import build_graph, to_networkx
from text_titler.host import FolderHost
from text_titler.logging_config import setup_logging
from text_titler.preprocessing import parse_sentences
from text_titler.runner import BatchReport, TitleRunner
from text_titler.scoring import score_graph
from text_titler.summarize import SummarizerConfig, select_top

def preview(text: str, limit: int = 80) -> str:
    return text[:limit] + "..." if len(text) > limit else text

def draw_graph_visualization(graph: Graph, scores: List[float], selected: List[int]):
    """Draw the sentence graph; node size follows rank score, selected nodes in yellow."""
    G = to_networkx(graph)

    fig, ax = plt.subplots(figsize=(10, 8))
    ax.set_title("Sentence Graph (node size = rank score)", fontsize=14, fontweight='bold')

    if len(G.nodes) > 0:
        pos = nx.spring_layout(G, k=2, iterations=50, seed=42)

        max_score = max(scores) if scores else 1.0
        sizes = [400 + 1200 * (scores[i] / max_score) for i in G.nodes()]
        colors = ['yellow' if i in selected else 'lightblue' for i in G.nodes()]
        nx.draw_networkx_nodes(G, pos, ax=ax, node_color=colors, node_size=sizes, alpha=0.8)

        edges = G.edges(data=True)
        if edges:
            weights = [edge[2]['weight'] for edge in edges]
            max_weight = max(weights) if weights else 1
            edge_widths = [3 * (w / max_weight) for w in weights]
            nx.draw_networkx_edges(G, pos, ax=ax, width=edge_widths, alpha=0.6, edge_color='gray')

        labels = {i: f"S{i+1}" for i in G.nodes()}
        nx.draw_networkx_labels(G, pos, labels, ax=ax, font_size=10, font_weight='bold')

        # edge weight labels only stay readable on small graphs
        if len(G.nodes) <= 10:
            edge_labels = {(u, v): f"{d['weight']:.2f}" for u, v, d in G.edges(data=True)}
            nx.draw_networkx_edge_labels(G, pos, edge_labels, ax=ax, font_size=8)

    ax.set_aspect('equal')
    ax.axis('off')
    plt.tight_layout()

    # Convert plot to image for Streamlit
    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close()
    return buf

def create_sidebar_controls(settings_path: Path):
    """Sidebar settings; returns (Settings, SummarizerConfig, debug_mode)."""
    try:
        stored = load_settings(settings_path)
    except ConfigurationError as e:
        st.sidebar.error(str(e))
        stored = Settings()

    st.sidebar.header("Gemini")
    api_key = st.sidebar.text_input("Gemini API Key", value=stored.api_key, type="password",
                                    help="Get this from https://aistudio.google.com/app/apikey")
    model_id = st.sidebar.text_input("Gemini Model ID", value=stored.model_id)

    st.sidebar.header("Summarizer")
    n_sentences = st.sidebar.number_input(
        "Number of sentences", min_value=1, max_value=100,
        value=stored.number_of_sentences, step=1,
        help="How many sentences to extract from the note to send to Gemini"
    )
    ordering = st.sidebar.radio("Sentence order", [ORDER_BY_OCCURRENCE, ORDER_BY_RANK], index=0,
                                help="Order of the extracted sentences in the prompt")
    damping = st.sidebar.slider("Damping factor", min_value=0.05, max_value=0.95, value=0.85, step=0.05)
    auto_update = st.sidebar.checkbox("Auto update title for untitled notes",
                                      value=stored.auto_update_untitled_notes)

    settings = Settings(api_key=api_key, model_id=model_id or stored.model_id,
                        number_of_sentences=int(n_sentences),
                        auto_update_untitled_notes=auto_update)
    if st.sidebar.button("Save settings"):
        saved = save_settings(settings, settings_path)
        st.sidebar.success(f"Saved to {saved}")

    st.sidebar.header("Debug Options")
    debug_mode = st.sidebar.checkbox("Enable Debug Mode", value=True, help="Show detailed pipeline steps")

    return settings, SummarizerConfig(damping=damping, ordering=ordering), debug_mode

def debug_pipeline(text: str, k: int, cfg: SummarizerConfig):
    """Run the extraction pipeline step by step and show each stage."""

    # Step 1: Sentence parsing
    st.header("Step 1: Sentence Parsing")
    with st.expander("Parsing Details", expanded=True):
        filtered = strip_image_embeds(text)
        sentences = parse_sentences(filtered)
        st.success(f"Kept {len(sentences)} sentences")

        col1, col2 = st.columns(2)
        with col1:
            st.metric("Lines removed (images)", text.count("\n") - filtered.count("\n"))
        with col2:
            st.metric("Total Tokens (processed)", sum(len(s.tokens) for s in sentences))

        sentences_df = pd.DataFrame([{
            "Sentence #": s.idx + 1,
            "Original Text": preview(s.text),
            "Tokens": len(s.tokens),
            "Processed Tokens": ", ".join(s.tokens[:8]) + ("..." if len(s.tokens) > 8 else ""),
        } for s in sentences])
        st.dataframe(sentences_df, use_container_width=True)

    if not sentences:
        st.warning("No sentences with enough words - the first 500 characters will be used instead")
        return

    # Step 2: Similarity matrix
    st.header("Step 2: Sørensen–Dice Similarity")
    with st.expander("Similarity Details", expanded=True):
        simM = compute_similarity_matrix(sentences)
        n_sentences = len(sentences)
        if n_sentences <= 50:
            sim_df = pd.DataFrame(simM,
                                  columns=[f"S{i+1}" for i in range(n_sentences)],
                                  index=[f"S{i+1}" for i in range(n_sentences)])
            st.dataframe(sim_df, use_container_width=True)
        else:
            st.info(f"Matrix too large to display ({n_sentences}×{n_sentences} = {n_sentences**2:,} cells)")
            flat_sim = simM[np.triu_indices(n_sentences, k=1)]
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Max Similarity", f"{flat_sim.max():.3f}")
            with col2:
                st.metric("Mean Similarity", f"{flat_sim.mean():.3f}")
            with col3:
                st.metric("Std Similarity", f"{flat_sim.std():.3f}")

    # Step 3: Graph and ranking
    st.header("Step 3: Graph Ranking")
    with st.expander("Ranking Details", expanded=True):
        graph = build_graph(sentences, simM)
        rank = score_graph(graph, damping=cfg.damping, max_iter=cfg.max_iter, tolerance=cfg.tolerance)
        selected = select_top(sentences, rank.scores, k, ordering=cfg.ordering)

        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Edges", len(graph.edges))
        with col2:
            st.metric("Iterations", rank.iterations)
        with col3:
            st.metric("Converged", "yes" if rank.converged else "no")

        if len(graph.nodes) <= 50:
            try:
                st.image(draw_graph_visualization(graph, rank.scores, selected),
                         caption="Sentence graph", use_column_width=True)
            except Exception as e:
                st.error(f"Could not generate graph visualization: {str(e)}")

        scoring_df = pd.DataFrame([{
            "Sentence #": s.idx + 1,
            "Score": f"{rank.scores[s.idx]:.4f}",
            "Selected": "yes" if s.idx in selected else "no",
            "Text": s.text,
        } for s in sentences])
        st.dataframe(scoring_df, use_container_width=True)

def show_report(report: BatchReport):
    if report and report.outcomes:
        st.dataframe(pd.DataFrame([{
            "Note": o.ref.stem,
            "Status": o.status,
            "Title": o.title or "",
            "Error": o.error or "",
        } for o in report.outcomes]), use_container_width=True)

def show_notices(host: FolderHost):
    for notice in host.drain_notices():
        st.info(notice)

def main():
    setup_logging()
    st.title("Note Title Generator")
    st.write("Extract key sentences with TextRank and let Gemini turn them into note titles")

    settings, summarizer_cfg, debug_mode = create_sidebar_controls(DEFAULT_SETTINGS_PATH)

    folder = st.text_input("Notes folder", value=str(Path.cwd()))
    host = FolderHost(Path(folder))
    if not host.root.is_dir():
        st.warning("Folder not found")
        return

    runner = TitleRunner(settings, host, summarizer=summarizer_cfg)
    notes = asyncio.run(host.list_open())
    if not notes:
        st.info("No Markdown notes in this folder")
        return

    if settings.auto_update_untitled_notes and st.button("Auto-update untitled notes"):
        with st.spinner("Updating untitled notes..."):
            report = asyncio.run(runner.auto_update_untitled())
        show_notices(host)
        show_report(report)

    # Single note
    st.subheader("Note")
    note = st.selectbox("Choose a note", notes, format_func=lambda p: p.name)
    try:
        text = asyncio.run(host.read(note))
    except (OSError, UnicodeDecodeError) as e:
        st.error(f"Could not read {note.name}: {e}")
        return
    st.text_area("Content", text, height=200, disabled=True)

    if debug_mode:
        st.markdown("---")
        st.title("Pipeline Debug Mode")
        debug_pipeline(text, settings.number_of_sentences, summarizer_cfg)

    try:
        extraction = extract_context(text, settings.number_of_sentences, cfg=summarizer_cfg)
        st.text_area("Prompt context", extraction.context, height=120, disabled=True)
        if extraction.used_fallback:
            st.warning(f"Fallback used ({extraction.fallback_reason})")
    except EmptyDocumentError as e:
        st.warning(str(e))

    if st.button("Generate Title", type="primary"):
        with st.spinner("Generating title with Gemini..."):
            outcome = asyncio.run(runner.title_document(note))
        show_notices(host)
        if outcome.new_ref:
            st.success(f"{outcome.status}: {outcome.new_ref.name}")

    # Batch
    st.markdown("---")
    st.subheader("Batch")
    chosen = st.multiselect("Notes to title", notes, format_func=lambda p: p.name)
    if chosen and st.button("Generate Titles"):
        with st.spinner(f"Generating titles for {len(chosen)} note(s)..."):
            report = asyncio.run(runner.run_batch(chosen))
        show_notices(host)
        show_report(report)

if __name__ == "__main__":
    main()
