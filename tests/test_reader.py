import gzip
import io
import pathlib
import shutil
import tempfile
import unittest

import Bio.bgzf

from bedcodec.codec import BEDCodec
from bedcodec.errors import FieldFormatError, FormatError
from bedcodec.model import FullBEDFeature, SimpleFeature
from bedcodec.reader import FeatureReader, LineReader


DATA = pathlib.Path(__file__).parent.joinpath("data")

FEATURES = (
    b"chr1\t100\t200\tfeatureA\t0\t+\n"
    b"chr1\t300\t400\tfeatureB\t0\t-\n"
)


class TestLineReader(unittest.TestCase):

    def test_undecodable_line(self):
        source = LineReader(io.BytesIO(b"chr1\t\xff\t5\nsecond\n"))
        with self.assertRaises(FieldFormatError) as ctx:
            source.peek()
        self.assertEqual(ctx.exception.line, "chr1\t\ufffd\t5")
        self.assertEqual(source.position, 0)
        self.assertRaises(FieldFormatError, source.readline)
        self.assertEqual(source.readline(), "second\n")

    def test_peek(self):
        source = LineReader(io.BytesIO(b"first\nsecond\n"))
        self.assertEqual(source.position, 0)
        self.assertEqual(source.peek(), "first\n")
        self.assertEqual(source.peek(), "first\n")
        self.assertEqual(source.position, 0)
        self.assertEqual(source.readline(), "first\n")
        self.assertEqual(source.position, 6)
        self.assertEqual(list(source), ["second\n"])
        self.assertIsNone(source.peek())
        self.assertIsNone(source.readline())


class TestHeaderOffset(unittest.TestCase):

    def setUp(self):
        self.codec = BEDCodec()

    def test_no_header(self):
        source = LineReader(io.BytesIO(FEATURES))
        self.assertEqual(self.codec.detect_header_offset(source), 0)
        self.assertEqual(source.readline(), "chr1\t100\t200\tfeatureA\t0\t+\n")

    def test_header(self):
        source = LineReader(io.BytesIO(b"track abc\n" + FEATURES))
        self.assertEqual(self.codec.detect_header_offset(source), 10)
        self.assertEqual(source.readline(), "chr1\t100\t200\tfeatureA\t0\t+\n")

    def test_malformed_first_record(self):
        source = LineReader(io.BytesIO(b"chr1\tx\t5\n" + FEATURES))
        self.assertEqual(self.codec.detect_header_offset(source), 9)

    def test_zero_length_first_record(self):
        source = LineReader(io.BytesIO(b"chr1\t5\t5\n" + FEATURES))
        self.assertEqual(self.codec.detect_header_offset(source), 0)
        self.assertEqual(source.readline(), "chr1\t5\t5\n")

    def test_undecodable_first_line(self):
        source = LineReader(io.BytesIO(b"\xff\xfe header\n" + FEATURES))
        self.assertEqual(self.codec.detect_header_offset(source), 10)
        self.assertTrue(source.peek().startswith("chr1"))

    def test_leading_blank_lines(self):
        source = LineReader(io.BytesIO(b"\n\n" + FEATURES))
        self.assertEqual(self.codec.detect_header_offset(source), 2)
        self.assertTrue(source.peek().startswith("chr1"))

    def test_empty(self):
        source = LineReader(io.BytesIO(b""))
        self.assertEqual(self.codec.detect_header_offset(source), 0)
        self.assertIsNone(source.readline())


class TestBlockCompressed(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _write_bgzf(self, name, data):
        path = pathlib.Path(self.tmpdir, name)
        with Bio.bgzf.BgzfWriter(str(path), "wb") as writer:
            writer.write(data)
        return path

    def test_no_header(self):
        path = self._write_bgzf("2featuresNoHeader.bed.gz", FEATURES)
        with FeatureReader(path) as reader:
            block, offset = Bio.bgzf.split_virtual_offset(reader.header_offset)
            self.assertEqual(block, 0)
            self.assertEqual(offset, 0)
            features = list(reader)
        self.assertEqual(len(features), 2)

    def test_header(self):
        path = self._write_bgzf("2featuresWithHeader.bed.gz", b"track abc\n" + FEATURES)
        with FeatureReader(path) as reader:
            block, offset = Bio.bgzf.split_virtual_offset(reader.header_offset)
            self.assertEqual(block, 0)
            self.assertEqual(offset, 10)
            features = list(reader)
        self.assertEqual([f.name for f in features], ["featureA", "featureB"])


class TestFeatureReader(unittest.TestCase):

    def test_good_file(self):
        with FeatureReader(DATA.joinpath("deletions.bed")) as reader:
            self.assertEqual(reader.header_offset, 0)
            features = list(reader)

        self.assertEqual(len(features), 10)
        for feature in features:
            self.assertTrue(feature.contig)
            self.assertGreaterEqual(feature.end, feature.start)
        self.assertEqual(features[0], SimpleFeature("1", 25592413 + 1, 25657872))
        self.assertEqual(features[3], SimpleFeature("1", 152555536 + 1, 152587611))
        self.assertEqual(features[9], SimpleFeature("14", 73996607 + 1, 74025282))

    def test_bad_file(self):
        # the eighth line has an extra tab
        features = []
        with self.assertRaises(FieldFormatError):
            with FeatureReader(DATA.joinpath("deletions_bad.bed")) as reader:
                for feature in reader:
                    features.append(feature)
        self.assertEqual(len(features), 7)

    def test_bad_file_skip_invalid(self):
        with FeatureReader(DATA.joinpath("deletions_bad.bed"), skip_invalid=True) as reader:
            features = list(reader)
            self.assertEqual(reader.skipped, 1)
        self.assertEqual(len(features), 9)
        self.assertEqual(features[7].contig, "12")

    def test_header_file(self):
        with FeatureReader(DATA.joinpath("clones.bed")) as reader:
            self.assertEqual(reader.header_offset, 47)
            features = list(reader)
        self.assertEqual(len(features), 2)
        for feature in features:
            self.assertIsInstance(feature, FullBEDFeature)
            self.assertEqual(len(feature.exons), 2)

    def test_gzip_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir, "deletions.bed.gz")
            with gzip.open(path, "wb") as dst:
                dst.write(DATA.joinpath("deletions.bed").read_bytes())
            with FeatureReader(path) as reader:
                features = list(reader)
        self.assertEqual(len(features), 10)

    def test_file_object(self):
        with FeatureReader(io.BytesIO(b"track abc\n" + FEATURES)) as reader:
            features = list(reader)
        self.assertEqual(len(features), 2)
        self.assertEqual(features[1].start, 301)

    def test_zero_length_records(self):
        with FeatureReader(io.BytesIO(b"chr1\t5\t5\nchr1\t10\t20\n")) as reader:
            self.assertEqual(reader.header_offset, 0)
            features = list(reader)
        self.assertEqual(features, [SimpleFeature("chr1", 6, 5), SimpleFeature("chr1", 11, 20)])

    def test_undecodable_line(self):
        data = b"chr1\t1\t2\nchr1\t\xff\xfe\t5\nchr1\t10\t20\n"
        features = []
        with self.assertRaises(FieldFormatError):
            with FeatureReader(io.BytesIO(data)) as reader:
                for feature in reader:
                    features.append(feature)
        self.assertEqual(features, [SimpleFeature("chr1", 2, 2)])

    def test_undecodable_line_skip_invalid(self):
        data = b"chr1\t1\t2\nchr1\t\xff\xfe\t5\nchr1\t10\t20\n"
        with FeatureReader(io.BytesIO(data), skip_invalid=True) as reader:
            features = list(reader)
            self.assertEqual(reader.skipped, 1)
        self.assertEqual(features, [SimpleFeature("chr1", 2, 2), SimpleFeature("chr1", 11, 20)])

    def test_metadata_lines_after_first_record(self):
        for line in [b"\n", b"# comment\n", b"track name=x\n"]:
            features = []
            with self.assertRaises(FormatError):
                with FeatureReader(io.BytesIO(FEATURES[:26] + line + FEATURES[26:])) as reader:
                    for feature in reader:
                        features.append(feature)
            self.assertEqual(len(features), 1)
