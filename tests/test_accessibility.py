"""
Tests for the accessibility scorer.
"""
from analyzers.accessibility import AccessibilityScorer, low_contrast_elements, unlabeled_inputs
from loader.parser import Document


def _page(body: str, lang: str = ' lang="en"') -> str:
    return f"<html{lang}><head><title>t</title></head><body>{body}</body></html>"


class TestAccessibilityScenarios:

    def test_clean_page_scores_100(self, make_context):
        """No images, links or inputs, one H1 and a declared language."""
        report = AccessibilityScorer().score(make_context(_page("<h1>Welcome</h1><p>Hello</p>")))
        assert report.score == 100
        assert report.level == "Excellent"
        assert report.issues == []
        assert report.good_points == [
            "Correct heading structure (one H1)",
            "Document language declared",
        ]

    def test_score_never_negative(self, make_context):
        inputs = '<input type="text">' * 15
        report = AccessibilityScorer().score(make_context(_page(inputs, lang="")))
        assert report.score == 0
        assert report.level == "Low"


class TestAccessibilityRules:

    def test_missing_alt_is_proportional(self, make_context):
        body = '<h1>A</h1><img src="a.png" alt="A"><img src="b.png">'
        report = AccessibilityScorer().score(make_context(_page(body)))
        assert report.score == 90
        assert report.issues == ["1 of 2 images have no alt attribute"]

    def test_all_images_with_alt_is_good_point(self, make_context):
        body = '<h1>A</h1><img src="a.png" alt="">'
        report = AccessibilityScorer().score(make_context(_page(body)))
        assert "All images have an alt attribute" in report.good_points

    def test_links_without_discernible_text(self, make_context):
        body = (
            "<h1>A</h1>"
            '<a href="/x"></a>'
            '<a href="/y"><img src="i.png" alt="Home"></a>'
            '<a href="/z" aria-label="Close"></a>'
            '<a href="/w"><span></span></a>'
        )
        report = AccessibilityScorer().score(make_context(_page(body)))
        assert report.details["links_without_text"] == 2
        assert report.score == 90

    def test_heading_penalties(self, make_context):
        none = AccessibilityScorer().score(make_context(_page("<p>x</p>")))
        several = AccessibilityScorer().score(make_context(_page("<h1>a</h1><h1>b</h1>")))
        assert none.score == 85
        assert several.score == 90
        assert "No H1 heading found" in none.issues

    def test_missing_lang(self, make_context):
        report = AccessibilityScorer().score(make_context(_page("<h1>A</h1>", lang="")))
        assert report.score == 90
        assert "Missing lang attribute on the html element" in report.issues

    def test_low_contrast_penalized_once(self, make_context):
        body = '<h1>A</h1><p style="color: #ccc">a</p><p style="color:gray">b</p>'
        report = AccessibilityScorer().score(make_context(_page(body)))
        assert report.score == 90
        assert report.details["low_contrast_elements"] == 2


class TestUnlabeledInputs:

    def test_label_detection(self):
        doc = Document(
            "<form>"
            '<label for="q">Search</label><input type="text" id="q">'
            '<input type="email" name="email">'
            '<input type="hidden" name="token">'
            '<input type="submit" value="Go">'
            '<input type="text" aria-label="Name">'
            "<label>City <input type=\"text\"></label>"
            "</form>"
        )
        assert unlabeled_inputs(doc) == 1

    def test_each_unlabeled_input_costs_ten(self, make_context):
        body = '<h1>A</h1><input type="text"><input type="password">'
        report = AccessibilityScorer().score(make_context(_page(body)))
        assert report.score == 80
        assert "2 form fields without a label" in report.issues


class TestLowContrast:

    def test_only_color_declarations_match(self):
        doc = Document(
            '<p style="background-color: gray">a</p>'
            '<p style="color: darkgray">b</p>'
            '<p style="color: #cccddd">c</p>'
            '<p style="color: #999999; font-weight: bold">d</p>'
        )
        assert low_contrast_elements(doc) == 1
