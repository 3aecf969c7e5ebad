from classify.services.result_aggregation import AggregationConfig, CourseInputs, aggregate_course, aggregate_courses


def _inputs(**overrides):
    base = dict(course_id=1, course_code="CSC101", course_title="Intro")
    base.update(overrides)
    return CourseInputs(**base)


def test_attendance_scaled_by_weight():
    result = aggregate_course(_inputs(attendance_present=8, attendance_total=10), AggregationConfig(attendance_weight=10))
    assert result.attendance.score == 8.0
    assert result.attendance.weight == 10
    assert result.total == 8.0


def test_zero_sessions_gives_zero_attendance():
    result = aggregate_course(_inputs(attendance_present=3, attendance_total=0), AggregationConfig())
    assert result.attendance.score == 0
    assert result.attendance.present == 0
    assert result.attendance.total == 0


def test_present_capped_at_total():
    result = aggregate_course(_inputs(attendance_present=12, attendance_total=10), AggregationConfig(attendance_weight=5))
    assert result.attendance.present == 10
    assert result.attendance.score == 5.0


def test_components_summed_and_rounded():
    result = aggregate_course(
        _inputs(
            attendance_present=2, attendance_total=3,
            test_scores=[7.5, 8.25], test_max=20,
            exam_scores=[45.0, 10.0], exam_max=80,
        ),
        AggregationConfig(attendance_weight=10),
    )
    assert result.attendance.score == 6.67
    assert result.test.score == 15.75
    assert result.test.max == 20
    assert result.exam.score == 55.0
    assert result.exam.max == 80
    assert result.total == round(20 / 3 + 15.75 + 55.0, 2)


def test_weight_change_only_affects_attendance():
    inputs = _inputs(attendance_present=5, attendance_total=10, test_scores=[10], exam_scores=[50])
    low = aggregate_course(inputs, AggregationConfig(attendance_weight=10))
    high = aggregate_course(inputs, AggregationConfig(attendance_weight=20))
    assert high.attendance.score - low.attendance.score == 5.0
    assert high.test == low.test
    assert high.exam == low.exam


def test_aggregate_courses_keeps_order():
    results = aggregate_courses([_inputs(course_id=2), _inputs(course_id=1)], AggregationConfig())
    assert [r.course_id for r in results] == [2, 1]
