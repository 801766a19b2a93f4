type UserName = str
type Token = str
type GroupId = int
type GameId = str
