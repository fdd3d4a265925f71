from quillchunk.report import analyze_chunk_distribution


def test_empty_input():
    report = analyze_chunk_distribution([])
    assert report.total_chunks == 0
    assert "No chunks created" in report.format()


def test_basic_statistics():
    report = analyze_chunk_distribution([500, 100, 300, 200, 400])
    assert report.total_chunks == 5
    assert report.smallest == 100
    assert report.largest == 500
    assert report.average == 300
    assert report.quintiles == {20: 100, 40: 200, 60: 300, 80: 400}


def test_order_of_input_does_not_matter():
    values = [512, 40, 90, 700, 250, 160]
    assert analyze_chunk_distribution(values) == analyze_chunk_distribution(sorted(values))


def test_distribution_sums_to_total():
    values = [10, 60, 150, 250, 350, 450, 505, 600, 600]
    report = analyze_chunk_distribution(values)
    assert sum(report.distribution.values()) == len(values)
    assert report.distribution["513+"] == 2
    assert report.distribution["501-512"] == 1


def test_distribution_keys_are_sorted():
    report = analyze_chunk_distribution([10, 60, 150, 600])
    assert list(report.distribution) == sorted(report.distribution)


def test_warning_counts_small_chunks():
    report = analyze_chunk_distribution([100, 200, 300, 400, 500], min_tokens=150)
    assert report.below_minimum == 1
    text = report.format()
    assert "WARNING: 1 chunks are below the minimum threshold of 150 tokens" in text
    assert "(20.0%)" in text


def test_success_when_all_meet_threshold():
    report = analyze_chunk_distribution([200, 300], min_tokens=150)
    assert report.below_minimum == 0
    text = report.format()
    assert "SUCCESS: All chunks meet the minimum threshold of 150 tokens" in text
    assert "Total chunks: 2" in text


def test_custom_threshold_is_reported():
    report = analyze_chunk_distribution([30, 80], min_tokens=50)
    assert report.below_minimum == 1
    assert report.threshold == 50
    assert "threshold of 50 tokens" in report.format()