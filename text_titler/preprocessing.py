from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional
from .datatypes import Sentence

_WORD_RE = re.compile(r"""[A-Za-z0-9_À-ɏ]+(?:'[A-Za-z0-9_À-ɏ]+)?""")  # simple token rule
_PARAGRAPH_RE = re.compile(r"\n\s*\n")
# terminal punctuation, optional closing quotes/brackets, then whitespace or end
_BOUNDARY_RE = re.compile(r"""[.!?]+['"”’)\]]*(?=\s|$)""")
_INITIAL_RE = re.compile(r"^[A-Z]\.$")                # J. R. R. Tolkien
_DOTTED_RE = re.compile(r"^(?:[A-Za-z]\.){2,}$")     # e.g. i.e. u.s.

ABBREVIATIONS = {
    'mr.','mrs.','ms.','dr.','prof.','sr.','jr.','st.','vs.','etc.','e.g.','i.e.','approx.',
    'fig.','inc.','ltd.','co.','corp.','dept.','est.','mt.','jan.','feb.','mar.','apr.',
    'jun.','jul.','aug.','sep.','sept.','oct.','nov.','dec.','cf.','al.','vol.','ch.','p.','pp.',
}

STOPWORDS = {
    # English stopword set
    'the','a','an','and','or','but','if','then','else','for','to','of','in','on','at','by','with','as',
    'is','are','was','were','be','been','being','this','that','these','those','it','its','from','into',
    'we','you','they','he','she','i','me','my','your','our','their','his','her','them','us','do','does',
    'did','not','no','so','than','too','very','can','could','should','would','will','shall','am','has',
    'have','had','having','there','here','what','which','who','whom','when','where','why','how','all',
    'any','each','few','more','most','other','some','such','only','own','same','just','also','about',
    'above','below','up','down','out','off','over','under','again','further','once','both','between',
    'through','during','before','after','because','until','while','may','might','must','let',"it's",
    "i'm","don't","can't","won't","isn't","aren't","doesn't","didn't",'yours','ours','theirs','itself',
    'myself','yourself','himself','herself','themselves','ourselves','nor','s','t',
}

@dataclass
class PreprocessConfig:
    lowercase: bool = True
    remove_stopwords: bool = True
    min_tokens: int = 3  # word tokens, counted before stopword removal

def _is_abbreviation(word: str, prev: str = "", nxt: str = "") -> bool:
    word = word.lstrip('"\'(“‘[')
    lower = word.lower()
    if lower in ABBREVIATIONS or _DOTTED_RE.match(word):
        return True
    if lower == "no.":
        return nxt[:1].isdigit()  # No. 5
    if _INITIAL_RE.match(word):
        # "vitamin C." ends a sentence, "by J. R. R. Tolkien" does not
        prev = prev.strip('"\'()[],;:“”‘’')
        return not (prev.islower() and prev not in STOPWORDS)
    return False

def _split_paragraph(paragraph: str) -> List[str]:
    parts: List[str] = []
    start = 0
    for m in _BOUNDARY_RE.finditer(paragraph):
        if m.group(0) == ".":
            tail = paragraph[start:m.end()].split()
            ahead = paragraph[m.end():].split(maxsplit=1)
            prev = tail[-2] if len(tail) > 1 else ""
            if tail and _is_abbreviation(tail[-1], prev, ahead[0] if ahead else ""):
                continue
        parts.append(paragraph[start:m.end()])
        start = m.end()
    parts.append(paragraph[start:])
    return parts

def split_sentences(text: str) -> List[str]:
    """Split on . ! ? (with an abbreviation guard) and on blank lines, keeping order."""
    sentences: List[str] = []
    for paragraph in _PARAGRAPH_RE.split(text.strip()):
        paragraph = " ".join(paragraph.split())
        for part in _split_paragraph(paragraph):
            part = part.strip()
            if part:
                sentences.append(part)
    return sentences

def words(text: str) -> List[str]:
    return [m.group(0) for m in _WORD_RE.finditer(text)]

def tokenize(text: str, cfg: PreprocessConfig) -> List[str]:
    toks = words(text)
    if cfg.lowercase:
        toks = [t.lower() for t in toks]
    if cfg.remove_stopwords:
        toks = [t for t in toks if t.lower() not in STOPWORDS]
    return toks

def parse_sentences(text: str, cfg: Optional[PreprocessConfig] = None) -> List[Sentence]:
    cfg = cfg or PreprocessConfig()
    sentences: List[Sentence] = []
    for raw in split_sentences(text):
        # too short to carry signal
        if len(words(raw)) < cfg.min_tokens:
            continue
        pos = len(sentences)
        sentences.append(Sentence(idx=pos, text=raw, tokens=tuple(tokenize(raw, cfg)), position=pos))
    return sentences
