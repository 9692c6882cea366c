import unittest

from domain.entities import PageText
from infrastructure.splitting.sentence_splitter import SentenceSplitter, segment, segment_pages

PHOTOSYNTHESIS = "Photosynthesis converts light into energy. Plants use chlorophyll. Energy powers cell growth."


class TestSegment(unittest.TestCase):
    def test_empty_input_yields_no_segments(self):
        self.assertEqual(segment("", target_size=100, overlap=10), [])
        self.assertEqual(segment("   \n\t ", target_size=100, overlap=10), [])
        self.assertEqual(segment_pages([], target_size=100, overlap=10), [])

    def test_short_text_is_a_single_segment(self):
        segments = segment("  One sentence.   Another one!  ", target_size=500, overlap=50)
        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].text, "One sentence. Another one!")
        self.assertEqual((segments[0].start_page, segments[0].end_page), (1, 1))

    def test_photosynthesis_scenario_produces_three_overlapping_chunks(self):
        segments = segment(PHOTOSYNTHESIS, target_size=40, overlap=5)
        self.assertEqual(
            [item.text for item in segments],
            [
                "Photosynthesis converts light into energy.",
                "ergy. Plants use chlorophyll.",
                "hyll. Energy powers cell growth.",
            ],
        )

    def test_overlap_prefix_comes_from_previous_chunk(self):
        text = " ".join(f"Sentence number {i} talks about topic {i}." for i in range(20))
        segments = segment(text, target_size=120, overlap=20)
        self.assertGreater(len(segments), 2)
        for previous, current in zip(segments, segments[1:]):
            prefix = current.text[:5]
            self.assertTrue(prefix)
            self.assertIn(prefix, previous.text[-20:])

    def test_every_sentence_appears_in_order(self):
        sentences = [f"Fact {i} is worth remembering." for i in range(30)]
        segments = segment(" ".join(sentences), target_size=100, overlap=0)
        flattened = " ".join(item.text for item in segments)
        self.assertEqual(flattened, " ".join(sentences))

    def test_every_sentence_appears_in_order_with_overlap(self):
        sentences = [f"Fact {i} is worth remembering." for i in range(30)]
        overlap = 12
        segments = segment(" ".join(sentences), target_size=100, overlap=overlap)
        self.assertGreater(len(segments), 2)
        fresh = [segments[0].text]
        for previous, current in zip(segments, segments[1:]):
            seed = previous.text[-overlap:].lstrip()
            self.assertTrue(current.text.startswith(seed + " "))
            fresh.append(current.text[len(seed) + 1 :])
        self.assertEqual(" ".join(fresh), " ".join(sentences))

    def test_chunk_size_is_bounded(self):
        text = " ".join(f"Short sentence {i} here." for i in range(50))
        target, overlap = 80, 15
        longest_sentence = max(len(f"Short sentence {i} here.") for i in range(50))
        for item in segment(text, target_size=target, overlap=overlap):
            self.assertLessEqual(len(item.text), target + overlap + longest_sentence)

    def test_oversized_sentence_is_kept_whole(self):
        long_sentence = "word " * 60 + "end."
        segments = segment(long_sentence, target_size=50, overlap=5)
        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].text, " ".join(long_sentence.split()))

    def test_decimal_points_do_not_split_sentences(self):
        segments = segment("Pi is about 3.14 in value. Next.", target_size=500, overlap=0)
        self.assertEqual(segments[0].text, "Pi is about 3.14 in value. Next.")

    def test_invalid_sizes_raise(self):
        with self.assertRaises(ValueError):
            segment("text.", target_size=0, overlap=0)
        with self.assertRaises(ValueError):
            segment("text.", target_size=10, overlap=-1)


class TestSegmentPages(unittest.TestCase):
    def test_pages_are_attributed_by_offset(self):
        pages = [
            PageText(page_number=1, text="Cells divide by mitosis. Mitosis has phases."),
            PageText(page_number=2, text="Meiosis creates gametes. Gametes carry half the chromosomes."),
            PageText(page_number=3, text="Genetics studies inheritance."),
        ]
        segments = segment_pages(pages, target_size=50, overlap=0)
        self.assertEqual(segments[0].text, "Cells divide by mitosis. Mitosis has phases.")
        self.assertEqual((segments[0].start_page, segments[0].end_page), (1, 1))
        self.assertEqual((segments[-1].start_page, segments[-1].end_page), (3, 3))
        for item in segments:
            self.assertLessEqual(item.start_page, item.end_page)
            self.assertGreaterEqual(item.start_page, 1)
            self.assertLessEqual(item.end_page, 3)

    def test_sentence_crossing_a_page_break_spans_both_pages(self):
        pages = [
            PageText(page_number=1, text="This sentence starts on one page"),
            PageText(page_number=2, text="and finishes on the next."),
        ]
        segments = segment_pages(pages, target_size=500, overlap=0)
        self.assertEqual(len(segments), 1)
        self.assertEqual(segments[0].text, "This sentence starts on one page and finishes on the next.")
        self.assertEqual((segments[0].start_page, segments[0].end_page), (1, 2))

    def test_word_overlap_seeds_next_chunk(self):
        pages = [PageText(page_number=1, text="Alpha beta gamma delta. Epsilon zeta eta theta.")]
        segments = segment_pages(pages, target_size=30, overlap=10)
        self.assertEqual(len(segments), 2)
        self.assertEqual(segments[1].text, "gamma delta. Epsilon zeta eta theta.")

    def test_overlap_seed_extends_page_range(self):
        pages = [
            PageText(page_number=1, text="First page sentence here."),
            PageText(page_number=2, text="Second page sentence here."),
        ]
        segments = segment_pages(pages, target_size=30, overlap=5)
        self.assertEqual(len(segments), 2)
        self.assertEqual(segments[1].text, "here. Second page sentence here.")
        self.assertEqual((segments[1].start_page, segments[1].end_page), (1, 2))

    def test_blank_pages_are_skipped_for_attribution(self):
        pages = [
            PageText(page_number=1, text=""),
            PageText(page_number=2, text="Only this page has text."),
        ]
        segments = segment_pages(pages, target_size=100, overlap=0)
        self.assertEqual((segments[0].start_page, segments[0].end_page), (2, 2))

    def test_every_sentence_appears_in_order_with_word_overlap(self):
        sentences = [f"Fact {i} is worth remembering." for i in range(30)]
        pages = [
            PageText(page_number=number + 1, text=" ".join(sentences[number * 10 : (number + 1) * 10]))
            for number in range(3)
        ]
        overlap = 10
        segments = segment_pages(pages, target_size=100, overlap=overlap)
        self.assertGreater(len(segments), 3)
        fresh = [segments[0].text]
        for previous, current in zip(segments, segments[1:]):
            seed = " ".join(previous.text.split()[-(overlap // 5) :])
            self.assertTrue(current.text.startswith(seed + " "))
            fresh.append(current.text[len(seed) + 1 :])
        self.assertEqual(" ".join(fresh), " ".join(sentences))
        for item in segments:
            self.assertLessEqual(item.start_page, item.end_page)

    def test_splitter_uses_configured_sizes(self):
        splitter = SentenceSplitter(target_size=40, overlap=5)
        segments = splitter.segment([PageText(page_number=1, text=PHOTOSYNTHESIS)])
        self.assertEqual(len(segments), 3)
        self.assertTrue(segments[1].text.startswith("energy."))


if __name__ == "__main__":
    unittest.main()
