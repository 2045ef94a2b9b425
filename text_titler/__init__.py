from .datatypes import Sentence, Edge, Graph, RankResult, SummaryResult, ExtractionResult
from .preprocessing import PreprocessConfig, parse_sentences, split_sentences
from .features import sorensen_dice, compute_similarity_matrix
from .graphing import build_graph, weight_matrix, to_networkx
from .scoring import textrank_scores, score_graph
from .summarize import SummarizerConfig, select_top, summarize, summarize_sentences
from .extraction import extract_context, strip_image_embeds
from .errors import (
    TitlerError, ConfigurationError, EmptyDocumentError, OracleError,
    OracleAuthError, OracleRateLimitError, OracleResponseError, RenameError,
)
from .config import Settings, load_settings, save_settings
from .oracle import TITLE_SCHEMA, GeminiTitleOracle, TitleOracle, build_prompt, parse_title_response, request_title
from .applicator import ApplyOutcome, ApplyStatus, apply_title, sanitize_title
from .host import DocumentHost, FolderHost
from .runner import BatchReport, DocumentOutcome, TitleRunner
