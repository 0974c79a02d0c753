import pytest

from survey_hitl.marks import has_mark_near, line_has_mark, marked_options

GLYPHS = ("○", "◯", "〇", "●", "◎", "⭕", "O", "0")


class TestHasMarkNear:
    @pytest.mark.parametrize("glyph", ["○", "●", "◎", "O"])
    def test_mark_before_and_after_are_symmetric(self, glyph):
        before = has_mark_near("展示会", f"{glyph}展示会", GLYPHS)
        after = has_mark_near("展示会", f"展示会{glyph}", GLYPHS)
        assert before is after is True

    def test_single_space_between_mark_and_candidate(self):
        assert has_mark_near("初めて", "○ 初めて", GLYPHS)
        assert has_mark_near("初めて", "初めて ○", GLYPHS)

    def test_mark_on_same_line(self):
        assert has_mark_near("2年以内", "購入時期   2年以内    ◎", GLYPHS)

    def test_mark_on_previous_line(self):
        assert has_mark_near("2回目", "◎\n2回目", GLYPHS)

    def test_mark_two_lines_up_does_not_count(self):
        assert not has_mark_near("2回目", "◎\n来場回数\n2回目", GLYPHS)

    def test_no_mark(self):
        assert not has_mark_near("キャブコン", "キャブコン\nトレーラー", GLYPHS)

    def test_digit_zero_inside_number_is_not_a_mark(self):
        text = "400万円以内\n500万円以内"
        assert not has_mark_near("400万円以内", text, GLYPHS)
        assert not has_mark_near("500万円以内", text, GLYPHS)

    def test_letter_o_inside_word_is_not_a_mark(self):
        assert not has_mark_near("YouTube", "YouTube", GLYPHS)
        assert not has_mark_near("HP", "HOME HP", GLYPHS)

    def test_empty_inputs(self):
        assert not has_mark_near("", "○", GLYPHS)
        assert not has_mark_near("初めて", "", GLYPHS)
        assert not has_mark_near("初めて", "○初めて", ())


class TestLineHasMark:
    def test_symbol_anywhere(self):
        assert line_has_mark("abc ● def", GLYPHS)

    def test_standalone_zero(self):
        assert line_has_mark("0 ハイエースベース", GLYPHS)
        assert not line_has_mark("1000万円以上", GLYPHS)


class TestMarkedOptions:
    def test_keeps_option_order(self):
        text = "トレーラー\n●ハイエースベース\nキャブコン ◎"
        options = ("軽自動車ベース", "ハイエースベース", "キャブコン", "トレーラー")
        assert marked_options(options, text, GLYPHS) == ["ハイエースベース", "キャブコン"]
