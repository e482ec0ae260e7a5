import os
from typing import Optional


import httpx


from ...schemas import ParsedWorkout
from ...structure import norm_name, normalize_parsed


PARSE_SERVICE_URL = os.getenv("PARSE_SERVICE_URL", "http://localhost:54321/functions/v1/parseWorkout")
PARSE_SERVICE_KEY = os.getenv("PARSE_SERVICE_KEY")
PARSE_TIMEOUT = float(os.getenv("PARSE_TIMEOUT", "30"))




def _headers() -> dict:
   headers = {"User-Agent": "liftplan/0.1"}
   if PARSE_SERVICE_KEY:
       headers["Authorization"] = f"Bearer {PARSE_SERVICE_KEY}"
   return headers




def fallback_title(text: str) -> str:
   lines = [ln for ln in text.splitlines() if ln.strip()]
   return norm_name(lines[0])[:60] if lines else "Workout"




# Public: parse free text
async def parse_workout(raw_text: str, client: Optional[httpx.AsyncClient] = None) -> ParsedWorkout:
   """
   POST {"raw_text": ...} to the parse service and normalize its answer.
   httpx errors propagate to the caller; there is no retry.
   """
   text = (raw_text or "").strip()
   if not text:
       raise ValueError("raw_text is empty")

   if client is None:
       async with httpx.AsyncClient(timeout=PARSE_TIMEOUT, headers=_headers()) as c:
           return await _post(c, text)
   return await _post(client, text)




async def _post(client: httpx.AsyncClient, text: str) -> ParsedWorkout:
   r = await client.post(PARSE_SERVICE_URL, json={"raw_text": text})
   r.raise_for_status()
   return normalize_parsed(r.json(), fallback_title=fallback_title(text))
