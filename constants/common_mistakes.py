# Frequent misspellings of correctly spelled words, used to broaden utterance matching.
from .types import MistakeTable

COMMON_MISTAKES: MistakeTable = {
    "accommodate": ["accomodate", "acommodate"],
    "achieve": ["acheive"],
    "acquire": ["aquire", "accquire"],
    "address": ["adress"],
    "again": ["agian"],
    "beginning": ["begining"],
    "believe": ["beleive", "belive"],
    "calendar": ["calender", "calander"],
    "cancel": ["cancle"],
    "colleague": ["collegue"],
    "committee": ["commitee", "comittee"],
    "definitely": ["definately", "definatly", "definitly", "defiantly"],
    "environment": ["enviroment"],
    "existence": ["existance"],
    "forward": ["foward"],
    "friend": ["freind"],
    "government": ["goverment"],
    "guarantee": ["garantee", "guarentee"],
    "immediately": ["immediatly", "imediately"],
    "independent": ["independant"],
    "knowledge": ["knowlege"],
    "necessary": ["neccessary", "necessery", "neccesary"],
    "occasion": ["occassion"],
    "occurred": ["occured"],
    "occurrence": ["occurence", "occurrance"],
    "receive": ["recieve"],
    "recommend": ["recomend", "reccommend"],
    "remember": ["rember", "remeber"],
    "schedule": ["schedual", "shedule"],
    "separate": ["seperate"],
    "successful": ["succesful", "successfull"],
    "surprise": ["suprise"],
    "tomorrow": ["tommorow", "tommorrow", "tomorow"],
    "tongue": ["tounge"],
    "truly": ["truely"],
    "until": ["untill"],
    "weird": ["wierd"],
    "which": ["wich"],
    "would": ["woud"],
}
