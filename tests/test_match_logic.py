from civicfix.config import Settings
from civicfix.match_logic import match_official, rank_candidates, score_candidate, select_matches
from civicfix.match_record import GeoBounds, LocationQuery, OfficialCandidate, ScoredCandidate

def official(official_id: str, **fields) -> OfficialCandidate:
    return OfficialCandidate(official_id=official_id, full_name=f"Official {official_id}", **fields)

def scored(official_id: str, score: int) -> ScoredCandidate:
    return ScoredCandidate(candidate=official(official_id), score=score)

#scenario A: pincode, ward, city and state all match
def test_full_jurisdiction_match_collects_every_rule():
    query = LocationQuery(pincode="110001", ward="Ward 5", city="Delhi", state="Delhi")
    cand = official("a", pincode="110001", ward="Ward 5", city="Delhi", state="Delhi")

    result = match_official(query, [cand])

    #identical pincodes also earn the full nearby bonus
    assert result.best_match is not None
    assert result.best_match.official_id == "a"
    assert result.best_match.score == 100 + 80 + 50 + 30 + 20
    assert result.best_match.match_reasons == (
        "Exact pincode match", "Exact ward match", "City match", "State match", "Nearby pincode"
    )

#scenario B
def test_city_and_state_only():
    query = LocationQuery(city="Mumbai", state="Maharashtra")
    result = match_official(query, [official("b", city="Mumbai", state="Maharashtra")])

    assert result.best_match.score == 80
    assert result.best_match.match_reasons == ("City match", "State match")

#scenario C
def test_nearby_pincode_alone_is_not_enough():
    query = LocationQuery(pincode="400001")
    result = match_official(query, [official("c", pincode="400005")])

    assert result.ranking[0].score == 16
    assert result.best_match is None
    assert result.alternatives == ()
    assert result.total_checked == 1

#scenario D
def test_coordinates_inside_bounds():
    query = LocationQuery(latitude=19.07, longitude=72.87)
    cand = official("d", geo_bounds=GeoBounds(north=19.3, south=18.9, east=73.0, west=72.7))

    result = match_official(query, [cand])

    assert result.best_match.score == 60
    assert result.best_match.match_reasons == ("Within coverage area",)

#scenario E
def test_alternatives_filtered_in_place():
    ranking = [scored("s90", 90), scored("s60", 60), scored("s45", 45), scored("s25", 25), scored("s10", 10)]
    result = select_matches(ranking)

    assert result.best_match.official_id == "s90"
    assert [a.official_id for a in result.alternatives] == ["s60", "s45", "s25"]

def test_dropped_alternative_is_not_backfilled():
    ranking = [scored("a", 90), scored("b", 60), scored("c", 15), scored("d", 25), scored("e", 24)]
    result = select_matches(ranking)

    #rank 4 is considered, rank 5 never is
    assert [a.official_id for a in result.alternatives] == ["b", "d"]

def test_empty_candidates():
    result = match_official(LocationQuery(city="Delhi", state="Delhi"), [])

    assert result.best_match is None
    assert result.alternatives == ()
    assert result.total_checked == 0

def test_low_top_score_gives_no_best_match_but_keeps_alternatives():
    ranking = [scored("a", 29), scored("b", 20), scored("c", 19)]
    result = select_matches(ranking)

    assert result.best_match is None
    assert [a.official_id for a in result.alternatives] == ["b"]

def test_threshold_boundaries_are_inclusive():
    result = select_matches([scored("a", 30), scored("b", 20)])

    assert result.best_match.official_id == "a"
    assert [a.official_id for a in result.alternatives] == ["b"]

def test_alternatives_never_include_best_match():
    query = LocationQuery(city="Delhi", state="Delhi")
    cands = [official(str(i), city="Delhi", state="Delhi") for i in range(6)]

    result = match_official(query, cands)

    assert result.best_match.official_id == "0"
    assert len(result.alternatives) == 3
    assert "0" not in [a.official_id for a in result.alternatives]

#ties keep input order
def test_ranking_is_stable_for_equal_scores():
    query = LocationQuery(city="Pune", state="Maharashtra")
    cands = [
        official("state-only", state="Maharashtra"),
        official("first", city="Pune", state="Maharashtra"),
        official("second", city="pune", state="MAHARASHTRA"),
        official("third", city="Pune", state="Maharashtra"),
    ]

    ranking = rank_candidates(query, cands)

    assert [s.official_id for s in ranking] == ["first", "second", "third", "state-only"]

def test_match_is_deterministic():
    query = LocationQuery(pincode="560001", city="Bengaluru", state="Karnataka", ward="12")
    cands = [
        official("x", city="Bengaluru", state="Karnataka"),
        official("y", pincode="560003", state="Karnataka"),
        official("z", ward="12", city="Bengaluru"),
    ]

    assert match_official(query, cands) == match_official(query, cands)

def test_candidates_are_not_mutated():
    cands = [official("b", city="Delhi"), official("a", city="Delhi", state="Delhi")]
    before = list(cands)

    match_official(LocationQuery(city="Delhi", state="Delhi"), cands)

    assert cands == before

def test_settings_thresholds_are_used():
    settings = Settings(_env_file=None, best_match_threshold=100, alternative_threshold=60, max_alternatives=1)
    query = LocationQuery(city="Delhi", state="Delhi")
    cands = [official("a", city="Delhi", state="Delhi"), official("b", city="Delhi", state="Delhi"),
             official("c", city="Delhi", state="Delhi")]

    result = match_official(query, cands, settings)

    assert result.best_match is None
    assert [a.official_id for a in result.alternatives] == ["b"]

#score is the sum of exactly the rules that hold
def test_score_candidate_every_rule():
    query = LocationQuery(
        latitude=12.97, longitude=77.59, city="Bengaluru", state="Karnataka",
        district="Bengaluru Urban", pincode="560001", ward="Ward 12", area="MG Road",
    )
    cand = official(
        "all", city="bengaluru", state="karnataka", district="bengaluru urban",
        pincode="560001", ward="ward 12", area="mg road",
        geo_bounds=GeoBounds(north=13.1, south=12.8, east=77.7, west=77.4),
    )

    s = score_candidate(query, cand)

    assert s.score == 100 + 80 + 70 + 60 + 50 + 40 + 30 + 20
    assert s.match_reasons == (
        "Exact pincode match", "Exact ward match", "Exact area match", "Within coverage area",
        "City match", "District match", "State match", "Nearby pincode",
    )

def test_missing_fields_never_score():
    query = LocationQuery(city="Delhi", pincode="110001")
    cand = official("none", state="Delhi", ward="Ward 5", geo_bounds=GeoBounds(north=1.0, south=0.0, east=1.0, west=0.0))

    s = score_candidate(query, cand)

    assert s.score == 0
    assert s.match_reasons == ()

def test_malformed_pincode_does_not_raise():
    query = LocationQuery(pincode="11000A")
    s = score_candidate(query, official("p", pincode="110001"))

    assert s.score == 0

def test_pincode_exact_rule_is_case_sensitive():
    query = LocationQuery(pincode="sw1a")
    s = score_candidate(query, official("p", pincode="SW1A"))

    assert s.score == 0

def test_partial_bounds_are_ignored():
    query = LocationQuery(latitude=10.0, longitude=10.0)
    cand = official("p", geo_bounds=GeoBounds(north=20.0, south=0.0, east=20.0))

    assert score_candidate(query, cand).score == 0
