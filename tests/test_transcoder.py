import io
import json
import os
import random
import tempfile
import unittest

from six_cities.errors import OfferImportError
from six_cities.generator import generate_offers
from six_cities.models import OFFER_COLUMNS, MockDataset
from six_cities.transcoder import TsvToJsonTranscoder, transcode_file

from sample_data import EXAMPLE_JSON, EXAMPLE_LINE, SAMPLE_MOCK_DATA

UNICODE_LINE = EXAMPLE_LINE.replace("Cozy Loft", "Café Überlin").replace("Paris", "Düsseldorf")


def run_chunks(chunks, typed=False):
    transcoder = TsvToJsonTranscoder(typed=typed)
    output = []
    for chunk in chunks:
        output.extend(transcoder.on_chunk(chunk))
    output.extend(transcoder.on_end())
    return output


class TranscoderTests(unittest.TestCase):
    def test_example_line(self):
        self.assertEqual(run_chunks([EXAMPLE_LINE]), [EXAMPLE_JSON])

    def test_example_line_as_bytes(self):
        self.assertEqual(run_chunks([EXAMPLE_LINE.encode("utf-8")]), [EXAMPLE_JSON])

    def test_chunk_boundary_independence(self):
        data = (EXAMPLE_LINE + "\n   \n" + UNICODE_LINE + EXAMPLE_LINE).encode("utf-8")
        expected = run_chunks([data])
        self.assertEqual(len(expected), 3)
        for split in range(len(data) + 1):
            self.assertEqual(run_chunks([data[:split], data[split:]]), expected, split)
        self.assertEqual(run_chunks([data[i:i + 1] for i in range(len(data))]), expected)

    def test_random_chunking(self):
        rng = random.Random(5)
        data = (EXAMPLE_LINE + UNICODE_LINE) * 20
        data = data.encode("utf-8")
        expected = run_chunks([data])
        for _ in range(20):
            cuts = sorted(rng.sample(range(1, len(data)), 15))
            chunks = [data[a:b] for a, b in zip([0] + cuts, cuts + [len(data)])]
            self.assertEqual(run_chunks(chunks), expected)

    def test_unicode_preserved(self):
        [line] = run_chunks([UNICODE_LINE.encode("utf-8")])
        self.assertIn("Café Überlin", line)
        self.assertEqual(json.loads(line)["city"], "Düsseldorf")

    def test_invalid_line_skipped_with_warning(self):
        bad = "only\tthree\tfields\n"
        transcoder = TsvToJsonTranscoder()
        with self.assertLogs("six_cities.transcoder", level="WARNING") as logs:
            output = transcoder.on_chunk(EXAMPLE_LINE + bad + EXAMPLE_LINE)
        self.assertEqual(output, [EXAMPLE_JSON, EXAMPLE_JSON])
        self.assertIn("Skipping invalid line", logs.output[0])
        self.assertEqual((transcoder.emitted, transcoder.skipped), (2, 1))

    def test_too_many_fields_skipped(self):
        too_many = EXAMPLE_LINE.replace("\n", "\textra\n")
        with self.assertLogs("six_cities.transcoder", level="WARNING"):
            self.assertEqual(run_chunks([too_many]), [])

    def test_blank_lines_ignored(self):
        self.assertEqual(run_chunks(["\n  \n\t\n", EXAMPLE_LINE, "\n"]), [EXAMPLE_JSON])

    def test_unterminated_last_line_flushed(self):
        self.assertEqual(run_chunks([EXAMPLE_LINE.rstrip("\n")]), [EXAMPLE_JSON])

    def test_unterminated_invalid_remainder_dropped(self):
        with self.assertLogs("six_cities.transcoder", level="WARNING"):
            self.assertEqual(run_chunks([EXAMPLE_LINE, "partial\tline"]), [EXAMPLE_JSON])

    def test_crlf_line_endings(self):
        self.assertEqual(run_chunks([EXAMPLE_LINE.replace("\n", "\r\n")]), [EXAMPLE_JSON])

    def test_crlf_pair_split_across_chunks(self):
        data = EXAMPLE_LINE.replace("\n", "\r\n") * 2
        cut = data.index("\r\n") + 1
        self.assertEqual(run_chunks([data[:cut], data[cut:]]), [EXAMPLE_JSON, EXAMPLE_JSON])
        self.assertEqual(run_chunks([data[i:i + 1] for i in range(len(data))]), [EXAMPLE_JSON, EXAMPLE_JSON])

    def test_undecodable_line_skipped_between_valid_lines(self):
        data = EXAMPLE_LINE.encode("utf-8") + b"bad\xff\tline\n" + EXAMPLE_LINE.encode("utf-8")
        transcoder = TsvToJsonTranscoder()
        with self.assertLogs("six_cities.transcoder", level="WARNING") as logs:
            output = transcoder.on_chunk(data) + transcoder.on_end()
        self.assertEqual(output, [EXAMPLE_JSON, EXAMPLE_JSON])
        self.assertIn("Skipping invalid line", logs.output[0])
        self.assertEqual((transcoder.emitted, transcoder.skipped), (2, 1))

    def test_undecodable_bytes_replaced_in_valid_row(self):
        data = EXAMPLE_LINE.encode("utf-8").replace(b"Cozy", b"Co\xffzy")
        [line] = run_chunks([data])
        self.assertEqual(json.loads(line)["title"], "Co\ufffdzy Loft")

    def test_undecodable_bytes_chunk_boundary_independence(self):
        data = (
            EXAMPLE_LINE.encode("utf-8").replace(b"Nice", b"N\xc3(ce")
            + b"\xff\xfe\n"
            + UNICODE_LINE.encode("utf-8")
        )
        expected = run_chunks([data])
        self.assertEqual(len(expected), 2)
        for split in range(len(data) + 1):
            self.assertEqual(run_chunks([data[:split], data[split:]]), expected, split)

    def test_typed_mode(self):
        [line] = run_chunks([EXAMPLE_LINE], typed=True)
        offer = json.loads(line)
        self.assertEqual(offer["photos"], ["img.jpg", "img2.jpg"])
        self.assertIs(offer["isPremium"], True)
        self.assertEqual(offer["rating"], 4.5)
        self.assertEqual(offer["price"], 120)
        self.assertEqual(offer["author"], {"name": "Jane", "email": "jane@x.com", "avatarUrl": "avatar.jpg", "isPro": False})
        self.assertEqual(offer["location"], {"latitude": 48.8566, "longitude": 2.3522})

    def test_typed_mode_skips_unparsable_rows(self):
        bad = EXAMPLE_LINE.replace("\t120\t", "\tcheap\t")
        transcoder = TsvToJsonTranscoder(typed=True)
        with self.assertLogs("six_cities.transcoder", level="WARNING") as logs:
            output = transcoder.on_chunk(bad + EXAMPLE_LINE)
        self.assertEqual(len(output), 1)
        self.assertIn("unparsable", logs.output[0])

    def test_round_trip_with_generated_rows(self):
        dataset = MockDataset.model_validate(SAMPLE_MOCK_DATA)
        lines = list(generate_offers(dataset, 25, rng=random.Random(11)))
        output = run_chunks(["".join(lines)])
        self.assertEqual(len(output), 25)
        for line, emitted in zip(lines, output):
            expected = dict(zip(OFFER_COLUMNS, line[:-1].split("\t")))
            self.assertEqual(json.loads(emitted), expected)


class TranscodeFileTests(unittest.TestCase):
    def test_streams_file_to_sink(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "offers.tsv")
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(EXAMPLE_LINE * 3 + "bad line\n")
            sink = io.StringIO()
            with self.assertLogs("six_cities.transcoder", level="INFO"):
                transcoder = transcode_file(path, sink=sink, chunk_size=7)
        self.assertEqual(sink.getvalue(), EXAMPLE_JSON * 3)
        self.assertEqual((transcoder.emitted, transcoder.skipped), (3, 1))

    def test_undecodable_line_does_not_stop_import(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "offers.tsv")
            with open(path, "wb") as f:
                f.write(EXAMPLE_LINE.encode("utf-8") + b"bad\xff\tline\n" + EXAMPLE_LINE.encode("utf-8"))
            sink = io.StringIO()
            with self.assertLogs("six_cities.transcoder", level="WARNING"):
                transcoder = transcode_file(path, sink=sink, chunk_size=16)
        self.assertEqual(sink.getvalue(), EXAMPLE_JSON * 2)
        self.assertEqual((transcoder.emitted, transcoder.skipped), (2, 1))

    def test_sink_errors_are_not_reported_as_read_errors(self):
        class ClosedPipe(io.StringIO):
            def writelines(self, lines):
                raise BrokenPipeError("stdout closed")

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "offers.tsv")
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(EXAMPLE_LINE)
            with self.assertRaises(BrokenPipeError):
                transcode_file(path, sink=ClosedPipe())

    def test_missing_file_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OfferImportError):
                transcode_file(os.path.join(tmp, "missing.tsv"), sink=io.StringIO())


if __name__ == "__main__":
    unittest.main()
