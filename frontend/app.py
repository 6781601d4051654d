import os

import pandas as pd
import requests
import streamlit as st

API = os.getenv("API_URL", "http://127.0.0.1:8000")

st.set_page_config(page_title="AI 한글 성명학", layout="wide")
st.title("AI 한글 성명학 연구소")


def api_get(path, params=None, timeout=30):
    r = requests.get(f"{API}{path}", params=params or {}, timeout=timeout)
    r.raise_for_status()
    return r


def api_post(path, json_data=None, timeout=120):
    r = requests.post(f"{API}{path}", json=json_data or {}, timeout=timeout)
    r.raise_for_status()
    return r


def show_error(e: Exception, context: str = ""):
    msg = f"{context}\n{str(e)}".strip()
    st.error(msg)
    with st.expander("Details"):
        st.exception(e)


# ---- sidebar inputs ----
st.sidebar.header("입력")

if "inputs" not in st.session_state:
    st.session_state.inputs = dict(surname="강", given_name="유정", gender="female",
                                   year_mode="year", year=1974, birth_date="1974-05-01")

try:
    presets = api_get("/presets", timeout=5).json().get("presets", [])
except Exception:
    presets = []

if presets:
    preset_labels = {p["id"]: p.get("label", p["id"]) for p in presets}
    chosen = st.sidebar.selectbox("샘플", list(preset_labels), format_func=lambda x: preset_labels.get(x, x))
    if st.sidebar.button("샘플 불러오기"):
        p = next(x for x in presets if x["id"] == chosen)
        st.session_state.inputs.update(surname=p["surname"], given_name=p["given_name"], gender=p["gender"])
        if p.get("birth_date"):
            st.session_state.inputs.update(year_mode="birth_date", birth_date=p["birth_date"])
        else:
            st.session_state.inputs.update(year_mode="year", year=int(p["year"]))

with st.sidebar.form("input_form"):
    inputs = st.session_state.inputs
    year_mode = st.radio("연도 입력 방식", ["year", "birth_date"], index=0 if inputs["year_mode"] == "year" else 1,
                         format_func=lambda m: "출생년도" if m == "year" else "생년월일 (입춘 기준)")
    year = st.number_input("출생년도", 1900, 2100, int(inputs["year"]))
    birth_date = st.text_input("생년월일 (YYYY-MM-DD)", inputs["birth_date"])
    surname = st.text_input("성", inputs["surname"], max_chars=1)
    given_name = st.text_input("이름", inputs["given_name"])
    gender = st.selectbox("성별", ["male", "female"], index=0 if inputs["gender"] == "male" else 1,
                          format_func=lambda g: "남성" if g == "male" else "여성")
    if st.form_submit_button("입력 적용"):
        st.session_state.inputs.update(year_mode=year_mode, year=int(year), birth_date=birth_date.strip(),
                                       surname=surname.strip(), given_name=given_name.strip(), gender=gender)
        st.success("입력이 적용되었습니다")

inputs = st.session_state.inputs
request_body = dict(surname=inputs["surname"], given_name=inputs["given_name"], gender=inputs["gender"], scope="all")
if inputs["year_mode"] == "birth_date":
    request_body["birth_date"] = inputs["birth_date"]
else:
    request_body["year"] = inputs["year"]

# ---- state ----
if "profile" not in st.session_state: st.session_state.profile = None
if "reading" not in st.session_state: st.session_state.reading = None

# ---- actions ----
c1, c2, _ = st.columns([1, 1, 3])

with c1:
    if st.button("분석하기"):
        if not inputs["surname"] or not inputs["given_name"]:
            st.warning("성명 정보를 모두 입력해 주세요.")
        else:
            try:
                st.session_state.profile = api_post("/analyze", request_body, timeout=15).json()["profile"]
                st.session_state.reading = None
            except Exception as e:
                show_error(e, "분석 오류")

with c2:
    if st.button("이름풀이 생성"):
        try:
            with st.spinner("정밀 분석 중입니다..."):
                data = api_post("/ai_reading", request_body).json()
            st.session_state.profile = data["profile"]
            st.session_state.reading = data.get("reading")
        except Exception as e:
            show_error(e, "이름풀이 생성 오류")

# ---- results ----
profile = st.session_state.profile
if profile:
    st.subheader(f"{profile['name']} {profile['saju_year']}년 {profile['ganji']}생")
    left, right = st.columns([1, 2])

    with left:
        df = pd.DataFrame(profile["table_rows"]).rename(
            columns={"symbol": "이름", "stem_label": "오행", "sipsung_name": "육친"}
        )
        st.dataframe(df, use_container_width=True, hide_index=True)

        core = profile.get("core_component") or {}
        status = core.get("status") or {}
        if core:
            st.markdown(f"**명주성** {core.get('symbol')} ({(core.get('sipsung') or {}).get('name', '미상')})")
            st.caption(status.get("rationale", ""))

    with right:
        st.markdown("### 이름풀이")
        if st.session_state.reading:
            st.markdown(st.session_state.reading)
        else:
            st.caption("분석 결과가 여기에 표시됩니다.")

    with st.expander("인접 관계 판정"):
        st.dataframe(pd.DataFrame(profile["adjacency"]), use_container_width=True, hide_index=True)
    with st.expander("구성 요소 배열"):
        st.code(profile["sequence_text"])
