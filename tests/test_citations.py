import unittest

from application.services.citations import build_citation, build_snippet
from domain.entities import Chunk, ScoredChunk


def make_chunk(text: str, start_page: int = 1, end_page: int = 1) -> ScoredChunk:
    chunk = Chunk(
        id="doc-0000",
        document_id="doc",
        text=text,
        start_page=start_page,
        end_page=end_page,
        vector=(0.0,) * 4,
    )
    return ScoredChunk(chunk=chunk, score=0.5)


class TestBuildSnippet(unittest.TestCase):
    def test_picks_sentences_mentioning_the_query(self):
        text = "Cells need energy to grow. The sky is blue today. Chlorophyll absorbs light energy."
        snippet = build_snippet(text, "chlorophyll energy")
        self.assertEqual(snippet, "Cells need energy to grow. Chlorophyll absorbs light energy.")

    def test_keeps_top_three_fragments_in_original_order(self):
        text = (
            "Energy is one topic here. Nothing relevant is here. "
            "Energy and energy again here. Energy energy energy everywhere. Energy at the end here."
        )
        snippet = build_snippet(text, "energy")
        self.assertEqual(
            snippet,
            "Energy is one topic here. Energy and energy again here. Energy energy energy everywhere.",
        )

    def test_query_without_long_tokens_falls_back_to_prefix(self):
        text = "word " * 60
        snippet = build_snippet(text, "a an the")
        self.assertEqual(snippet, text.strip()[:150].rstrip() + "...")

    def test_no_matching_fragment_falls_back(self):
        text = "Mitosis divides the nucleus of a cell."
        self.assertEqual(build_snippet(text, "photosynthesis"), text)

    def test_long_selection_is_truncated(self):
        sentence = "Photosynthesis happens inside chloroplasts of every green plant cell"
        text = ". ".join([sentence] * 5) + "."
        snippet = build_snippet(text, "photosynthesis")
        self.assertTrue(snippet.endswith("..."))
        self.assertLessEqual(len(snippet), 203)


class TestBuildCitation(unittest.TestCase):
    def test_citation_carries_document_and_page_range(self):
        citation = build_citation(
            make_chunk("Plants use chlorophyll to capture light.", start_page=2, end_page=4),
            "chlorophyll",
            document_name="biology.pdf",
        )
        self.assertEqual(citation.document_id, "doc")
        self.assertEqual(citation.document_name, "biology.pdf")
        self.assertEqual(citation.pages, [2, 3, 4])
        self.assertIn("chlorophyll", citation.snippet)

    def test_single_page_citation(self):
        citation = build_citation(make_chunk("Short text."), "short", document_name="notes.pdf")
        self.assertEqual(citation.pages, [1])


if __name__ == "__main__":
    unittest.main()
